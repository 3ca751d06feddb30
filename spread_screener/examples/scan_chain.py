#!/usr/bin/env python3
"""Example: Scan a small option chain for multi-leg strategies.

This script demonstrates the complete scanning pipeline:
1. Load configuration from YAML
2. Build option legs from raw chain records
3. Generate and evaluate candidates for every strategy family
4. Rank by risk/reward
5. Display results
"""

import sys
from datetime import date, timedelta
from pathlib import Path

# Add parent directory to path to import spread_screener modules
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from spread_screener.models.option_leg import legs_from_records
from spread_screener.scanner import evaluate_candidates, load_scan_config, scan_strategies
from spread_screener.utils.logging_config import setup_logging
from spread_screener.output.console import (
    print_header,
    print_summary,
    print_ranked_results,
    print_detailed_strategy,
)


def build_sample_records(underlying: str, expiration: date):
    """Synthetic chain around a 28.50 spot (premiums per unit)."""
    calls = [(26.0, 2.95, 0.38), (27.0, 2.15, 0.36), (28.0, 1.50, 0.35),
             (29.0, 0.98, 0.34), (30.0, 0.60, 0.34), (31.0, 0.35, 0.35)]
    puts = [(26.0, 0.30, 0.37), (27.0, 0.55, 0.36), (28.0, 0.92, 0.35),
            (29.0, 1.45, 0.35), (30.0, 2.12, 0.36), (31.0, 2.90, 0.38)]

    records = []
    for kind, quotes in (("CALL", calls), ("PUT", puts)):
        for strike, premium, iv in quotes:
            records.append({
                'underlying': underlying,
                'symbol': f"{underlying}{kind[0]}{strike:.0f}",
                'expiration': expiration.isoformat(),
                'kind': kind,
                'strike': strike,
                'premium': premium,
                'implied_vol': iv,
            })
    return records


def main():
    """Run a strategy scan on a synthetic chain."""
    setup_logging(log_level="WARNING")

    print("Loading configuration...")
    config = load_scan_config()

    today = date.today()
    expiration = today + timedelta(days=30)
    spot_price = 28.50

    print("Building option chain...")
    legs = legs_from_records(build_sample_records("PETR4", expiration), as_of=today)
    print(f"  Loaded {len(legs)} legs")

    evaluated = evaluate_candidates(legs, spot_price, config=config)

    ranked = scan_strategies(
        legs,
        spot_price=spot_price,
        fee_per_leg=0.0,
        lot_size=100,
        max_risk_reward=5.0,
        config=config,
    )

    print_header("PETR4", spot_price)
    print_summary(total_legs=len(legs), evaluated_count=len(evaluated), ranked_count=len(ranked))
    print_ranked_results(ranked)

    if ranked:
        print("\n" + "=" * 80)
        print("DETAILED VIEW: Top Strategy")
        print("=" * 80)
        print_detailed_strategy(ranked[0], rank=1)

    print("\nScan complete!\n")


if __name__ == "__main__":
    main()
