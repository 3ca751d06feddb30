"""Console output formatter for strategy scan results."""

from typing import List

from ..analytics.payoff import payoff_at_expiration
from ..models.strategy import StrategyMetrics, is_unbounded
from ..risk.margin import MarginCalculator


def format_amount(value, precision: int = 2) -> str:
    """Render a money amount, mapping the unbounded sentinel to 'UNBOUNDED'."""
    if value is None:
        return "N/A"
    if is_unbounded(value):
        return "UNBOUNDED"
    return f"${value:,.{precision}f}"


def format_ratio(value) -> str:
    return "N/A" if value is None else f"{value:.2f}"


def print_header(underlying: str, spot_price: float):
    """Print scan session header.

    Args:
        underlying: Underlying symbol
        spot_price: Current underlying price
    """
    print("\n" + "=" * 80)
    print(f"  SPREAD SCREENER - {underlying}")
    print(f"  Spot Price: ${spot_price:.2f}")
    print("=" * 80)


def print_summary(
    total_legs: int,
    evaluated_count: int,
    ranked_count: int,
):
    """Print summary of scan results.

    Args:
        total_legs: Number of input legs
        evaluated_count: Number of records emitted by the evaluators
        ranked_count: Number of records after ranking
    """
    print("\nSummary:")
    print(f"  Input legs: {total_legs}")
    print(f"  Strategies evaluated: {evaluated_count}")
    print(f"  Displaying {ranked_count} ranked results\n")


def print_ranked_results(ranked: List[StrategyMetrics]):
    """Print ranked strategies as a compact table.

    Args:
        ranked: Ranked StrategyMetrics (financial fields set)
    """
    if not ranked:
        print("No strategies found matching criteria.")
        return

    print("\nRanked Strategies:")
    print("-" * 120)

    header = (
        f"{'Rank':>4} {'Strategy':<18} {'Exp':^10} {'Strikes':^24} {'Type':>6} "
        f"{'Premium':>8} {'Profit':>12} {'Loss':>12} {'R/R':>6} {'BD':>4}"
    )
    print(header)
    print("-" * 120)

    for rank, m in enumerate(ranked, start=1):
        profit = m.profit_financial if m.is_ranked else m.max_profit
        loss = m.loss_financial if m.is_ranked else m.max_risk
        loss_str = format_amount(loss) + ("*" if m.loss_is_estimate else "")

        row = (
            f"{rank:>4} {m.name:<18} {m.expiration.strftime('%Y-%m-%d'):^10} "
            f"{m.strike_description:^24} {m.nature:>6} "
            f"{abs(m.net_premium):>8.2f} {format_amount(profit):>12} {loss_str:>12} "
            f"{format_ratio(m.risk_reward):>6} {m.business_days:>4}"
        )
        print(row)

    print("-" * 120)
    if any(m.loss_is_estimate for m in ranked):
        print("* loss is a margin estimate (unbounded risk)")


def print_detailed_strategy(m: StrategyMetrics, rank: int = 1):
    """Print detailed view of a single strategy record.

    Args:
        m: StrategyMetrics to display
        rank: Rank number (for display purposes)
    """
    print(f"\n{'=' * 80}")
    print(f"Rank #{rank}: {m.underlying} {m.name}")
    print(f"{'=' * 80}")

    print(f"\nExpiration: {m.expiration.strftime('%Y-%m-%d')} ({m.business_days} business days)")
    print(f"Spot Price: ${m.spot_price:.2f}")

    print("\nStructure:")
    for sl in m.legs:
        print(f"  {sl.label}  @ {sl.leg.premium:.2f}")

    print("\nPer Unit:")
    print(f"  Net Premium:      {m.net_premium:+.2f} ({m.nature})")
    print(f"  Max Profit:       {format_amount(m.max_profit)}")
    print(f"  Max Loss:         {format_amount(m.max_loss)}")
    print(f"  Breakevens:       {' / '.join(f'${b:.2f}' for b in m.breakevens) or 'none'}")
    if m.width is not None:
        print(f"  Width:            {m.width:.2f}")
    print(f"  P/L at spot:      {payoff_at_expiration(m, m.spot_price):+.2f}")

    if m.is_ranked:
        print(f"\nPosition (lot {m.lot_size}):")
        print(f"  Fees:             {format_amount(m.fees_total)}")
        print(f"  Profit:           {format_amount(m.profit_financial)}")
        print(f"  Loss:             {format_amount(m.loss_financial)}"
              + (" (margin estimate)" if m.loss_is_estimate else ""))
        print(f"  Risk/Reward:      {format_ratio(m.risk_reward)}")
        print(f"  Return on Risk:   {format_ratio(m.return_on_risk)}")
        print(f"  Margin Estimate:  {format_amount(MarginCalculator.estimate(m, m.lot_size))}")

    greeks = m.position_greeks or m.greeks
    print("\nGreeks:")
    print(f"  Delta: {greeks.delta:+.4f}  Gamma: {greeks.gamma:+.4f}  "
          f"Theta: {greeks.theta:+.4f}  Vega: {greeks.vega:+.4f}")

    print(f"{'=' * 80}\n")
