"""Call butterfly evaluators (long and short)."""

import logging
from typing import Tuple

from ..models.option_leg import OptionLeg
from ..models.strategy import StrategyKind, StrategyLeg, StrategyMetrics
from ..utils.cache import GreeksCache
from .common import EvaluatorConfig, build_record, credit_within_width, same_series

logger = logging.getLogger("spread_screener.butterfly")


def _wing_gap(triple: Tuple[OptionLeg, OptionLeg, OptionLeg]) -> float | None:
    low, mid, high = triple
    if not all(leg.is_call and leg.is_usable for leg in triple) or not same_series(triple):
        return None
    gap = mid.strike - low.strike
    if gap <= 0 or high.strike <= mid.strike:
        return None
    return gap


def evaluate_butterfly(
    triple: Tuple[OptionLeg, OptionLeg, OptionLeg],
    spot: float,
    fee_per_leg: float = 0.0,
    config: EvaluatorConfig | None = None,
    cache: GreeksCache | None = None,
) -> StrategyMetrics | None:
    """Evaluate a long call butterfly: buy low, sell 2x middle, buy high.

    The gap used for max profit is the lower gap (middle - low); the
    generator guarantees the upper gap matches it within tolerance. Both
    breakevens are measured from that same gap, so the upper one sits at
    middle + gap - cost.

    Args:
        triple: (low, middle, high) call legs
        spot: Current underlying price
        fee_per_leg: Flat fee per contract leg
        config: Sanity filter thresholds
        cache: Optional per-scan Greeks cache

    Returns:
        StrategyMetrics, or None if the triple fails a check
    """
    config = config or EvaluatorConfig()
    gap = _wing_gap(triple)
    if gap is None:
        return None
    low, mid, high = triple

    cost = low.premium + high.premium - 2 * mid.premium
    if cost <= config.min_net_premium:
        logger.debug("Rejected butterfly %s: degenerate cost %.4f", mid.symbol, cost)
        return None
    if cost >= gap:
        logger.debug("Rejected butterfly %s: cost %.2f not below gap %.2f", mid.symbol, cost, gap)
        return None

    strategy_legs = (
        StrategyLeg(low, "BUY"),
        StrategyLeg(mid, "SELL", quantity=2),
        StrategyLeg(high, "BUY"),
    )

    return build_record(
        kind=StrategyKind.BUTTERFLY_CALL,
        spread_type="BUTTERFLY",
        strategy_legs=strategy_legs,
        spot=spot,
        fee_per_leg=fee_per_leg,
        net_premium=-cost,
        max_profit=gap - cost,
        max_loss=-cost,
        breakevens=(low.strike + cost, mid.strike + gap - cost),
        width=gap,
        config=config,
        cache=cache,
    )


def evaluate_short_butterfly(
    triple: Tuple[OptionLeg, OptionLeg, OptionLeg],
    spot: float,
    fee_per_leg: float = 0.0,
    config: EvaluatorConfig | None = None,
    cache: GreeksCache | None = None,
) -> StrategyMetrics | None:
    """Evaluate a short call butterfly: sell low, buy 2x middle, sell high.

    A credit structure that profits when the underlying leaves the wings.
    Max profit is the credit, max loss is gap - credit at the middle strike.
    The credit passes the same width sanity filter as credit spreads.
    """
    config = config or EvaluatorConfig()
    gap = _wing_gap(triple)
    if gap is None:
        return None
    low, mid, high = triple

    credit = low.premium + high.premium - 2 * mid.premium
    if credit <= config.min_net_premium:
        logger.debug("Rejected short butterfly %s: degenerate credit %.4f", mid.symbol, credit)
        return None
    if credit >= gap or not credit_within_width(credit, gap, config):
        logger.debug("Rejected short butterfly %s: credit %.2f too close to gap %.2f",
                     mid.symbol, credit, gap)
        return None

    strategy_legs = (
        StrategyLeg(low, "SELL"),
        StrategyLeg(mid, "BUY", quantity=2),
        StrategyLeg(high, "SELL"),
    )

    return build_record(
        kind=StrategyKind.SHORT_BUTTERFLY_CALL,
        spread_type="SHORT BUTTERFLY",
        strategy_legs=strategy_legs,
        spot=spot,
        fee_per_leg=fee_per_leg,
        net_premium=credit,
        max_profit=credit,
        max_loss=-(gap - credit),
        breakevens=(low.strike + credit, mid.strike + gap - credit),
        width=gap,
        config=config,
        cache=cache,
    )
