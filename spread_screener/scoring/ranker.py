"""Financial rescaling, filtering, deduplication and ranking of strategies.

Evaluators report per-unit figures; the ranker turns them into lot-sized,
fee-adjusted amounts, computes risk/reward, drops records outside the
caller's risk budget, keeps the best record per strategy name and sorts.
"""

import logging
from dataclasses import replace
from typing import Any, Dict, List

from ..models.strategy import UNBOUNDED, StrategyMetrics, is_unbounded
from ..risk.margin import DEFAULT_NAKED_RATE, MarginCalculator
from ..utils.error_handling import ConfigurationError, safe_divide

logger = logging.getLogger("spread_screener.ranker")

SORT_ORDERS = ("risk_reward", "return")


class RankingConfig:
    """Configuration for financial scaling and ranking."""

    def __init__(
        self,
        lot_size: int = 100,
        fee_per_leg: float = 0.0,
        round_trip_fees: bool = False,
        max_risk_reward: float | None = None,
        naked_margin_rate: float = DEFAULT_NAKED_RATE,
        sort_by: str = "risk_reward",
        top_n: int | None = None,
    ):
        """Initialize ranking configuration.

        Args:
            lot_size: Units of underlying per position
            fee_per_leg: Flat transaction cost per leg
            round_trip_fees: Charge fees for both opening and closing
            max_risk_reward: Drop records with loss/profit above this (None = keep all)
            naked_margin_rate: Collateral fraction used as the loss proxy for
                unbounded-loss positions
            sort_by: 'risk_reward' (ascending) or 'return' (descending return on risk)
            top_n: Optional limit on number of results

        Raises:
            ConfigurationError: If any value is out of range
        """
        if lot_size <= 0:
            raise ConfigurationError(f"lot_size must be positive, got {lot_size}")
        if fee_per_leg < 0:
            raise ConfigurationError(f"fee_per_leg must be non-negative, got {fee_per_leg}")
        if max_risk_reward is not None and max_risk_reward <= 0:
            raise ConfigurationError(f"max_risk_reward must be positive, got {max_risk_reward}")
        if naked_margin_rate <= 0:
            raise ConfigurationError(f"naked_margin_rate must be positive, got {naked_margin_rate}")
        if sort_by not in SORT_ORDERS:
            raise ConfigurationError(f"sort_by must be one of {SORT_ORDERS}, got {sort_by!r}")
        if top_n is not None and top_n <= 0:
            raise ConfigurationError(f"top_n must be positive, got {top_n}")

        self.lot_size = lot_size
        self.fee_per_leg = fee_per_leg
        self.round_trip_fees = round_trip_fees
        self.max_risk_reward = max_risk_reward
        self.naked_margin_rate = naked_margin_rate
        self.sort_by = sort_by
        self.top_n = top_n

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "RankingConfig":
        """Create RankingConfig from dictionary (e.g., from YAML)."""
        return cls(
            lot_size=config.get('lot_size', 100),
            fee_per_leg=config.get('fee_per_leg', 0.0),
            round_trip_fees=config.get('round_trip_fees', False),
            max_risk_reward=config.get('max_risk_reward'),
            naked_margin_rate=config.get('naked_margin_rate', DEFAULT_NAKED_RATE),
            sort_by=config.get('sort_by', 'risk_reward'),
            top_n=config.get('top_n'),
        )


def to_financial(metrics: StrategyMetrics, config: RankingConfig) -> StrategyMetrics | None:
    """Rescale one unit record into lot-sized, fee-adjusted terms.

    profit_financial = unit profit * lot - fees
    loss_financial = unit loss * lot + fees

    Unbounded losses use the naked-short margin estimate as a proxy, and
    a zero max loss uses the debit paid.

    Args:
        metrics: Unit record from an evaluator
        config: Ranking configuration

    Returns:
        New StrategyMetrics with financial fields set, or None when the
        profit after fees is not positive
    """
    lot = config.lot_size
    fees = len(metrics.legs) * config.fee_per_leg
    if config.round_trip_fees:
        fees *= 2

    if is_unbounded(metrics.max_loss):
        loss_financial = MarginCalculator.naked_short_margin(
            metrics.spot_price, metrics.net_premium, lot, config.naked_margin_rate
        ) + fees
        loss_is_estimate = True
    elif metrics.max_loss == 0:
        # Riskless at expiry (box); capital tied up is the debit paid
        loss_financial = MarginCalculator.debit_margin(metrics.net_premium, lot) + fees
        loss_is_estimate = True
    else:
        loss_financial = abs(metrics.max_loss) * lot + fees
        loss_is_estimate = False

    if is_unbounded(metrics.max_profit):
        profit_financial = UNBOUNDED
        risk_reward = None
        return_on_risk = None
    else:
        profit_financial = metrics.max_profit * lot - fees
        if profit_financial <= 0:
            logger.debug("Dropped %s %s: profit %.2f after fees %.2f",
                         metrics.name, metrics.strike_description, profit_financial, fees)
            return None
        risk_reward = safe_divide(loss_financial, profit_financial)
        return_on_risk = safe_divide(profit_financial, loss_financial)

    return replace(
        metrics,
        lot_size=lot,
        fees_total=fees,
        profit_financial=profit_financial,
        loss_financial=loss_financial,
        loss_is_estimate=loss_is_estimate,
        risk_reward=risk_reward,
        return_on_risk=return_on_risk,
        position_greeks=metrics.greeks.scaled(lot),
    )


def _sort_key(indexed, sort_by: str):
    index, metrics = indexed
    if sort_by == "return":
        value = metrics.return_on_risk
        return (value is None, -(value or 0.0), index)
    value = metrics.risk_reward
    return (value is None, value or 0.0, index)


def rank_strategies(
    records: List[StrategyMetrics],
    config: RankingConfig | None = None,
) -> List[StrategyMetrics]:
    """Rescale, filter, deduplicate and sort evaluated strategies.

    Steps:
        1. Rescale each record into financial terms (drop non-positive profit)
        2. Drop records whose risk/reward exceeds max_risk_reward
           (unbounded-profit records have no ratio and are kept)
        3. Keep the best record per strategy name
        4. Stable sort: ascending risk/reward, or descending return on risk;
           records without a ratio sort last, ties keep discovery order

    Args:
        records: Unit records in discovery order
        config: Ranking configuration

    Returns:
        Ranked list of StrategyMetrics
    """
    config = config or RankingConfig()

    scaled = []
    for metrics in records:
        financial = to_financial(metrics, config)
        if financial is not None:
            scaled.append(financial)

    if config.max_risk_reward is not None:
        within = [
            m for m in scaled
            if m.risk_reward is None or m.risk_reward <= config.max_risk_reward
        ]
        logger.debug("Risk/reward filter kept %d/%d records", len(within), len(scaled))
        scaled = within

    # Best per name; earlier record wins ties
    best: Dict[str, tuple] = {}
    for index, metrics in enumerate(scaled):
        current = best.get(metrics.name)
        if current is None or _sort_key((index, metrics), config.sort_by) < _sort_key(current, config.sort_by):
            best[metrics.name] = (index, metrics)

    ranked = [metrics for _, metrics in sorted(best.values(), key=lambda item: _sort_key(item, config.sort_by))]

    if config.top_n is not None:
        ranked = ranked[:config.top_n]

    logger.info("Ranked %d strategies from %d records", len(ranked), len(records))
    return ranked
