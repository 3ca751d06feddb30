"""Iron condor evaluator."""

import logging
from typing import Tuple

from ..models.option_leg import OptionLeg
from ..models.strategy import StrategyKind, StrategyLeg, StrategyMetrics
from ..utils.cache import GreeksCache
from .common import EvaluatorConfig, build_record, credit_within_width, same_series

logger = logging.getLogger("spread_screener.iron_condor")


def evaluate_iron_condor(
    quad: Tuple[OptionLeg, OptionLeg, OptionLeg, OptionLeg],
    spot: float,
    fee_per_leg: float = 0.0,
    config: EvaluatorConfig | None = None,
    cache: GreeksCache | None = None,
) -> StrategyMetrics | None:
    """Evaluate an iron condor (bull put spread + bear call spread).

    Args:
        quad: (long put, short put, short call, long call)
        spot: Current underlying price
        fee_per_leg: Flat fee per contract leg
        config: Sanity filter thresholds
        cache: Optional per-scan Greeks cache

    Returns:
        StrategyMetrics, or None if the quad fails a check

    Validation checks:
        - Strikes strictly increase: long put < short put < short call < long call
        - Net credit above the minimum and within the allowed fraction of
          the wider side
        - Max loss = wider side width - credit
    """
    config = config or EvaluatorConfig()
    long_put, short_put, short_call, long_call = quad

    if not (long_put.is_put and short_put.is_put and short_call.is_call and long_call.is_call):
        return None
    if not all(leg.is_usable for leg in quad) or not same_series(quad):
        return None

    if not long_put.strike < short_put.strike < short_call.strike < long_call.strike:
        return None

    put_width = short_put.strike - long_put.strike
    call_width = long_call.strike - short_call.strike
    max_width = max(put_width, call_width)

    credit = (short_put.premium + short_call.premium) - (long_put.premium + long_call.premium)
    if credit <= config.min_net_premium:
        logger.debug("Rejected iron condor %s/%s: degenerate credit %.4f",
                     short_put.strike, short_call.strike, credit)
        return None
    if credit >= max_width or not credit_within_width(credit, max_width, config):
        logger.debug("Rejected iron condor %s/%s: credit %.2f too close to width %.2f",
                     short_put.strike, short_call.strike, credit, max_width)
        return None

    strategy_legs = (
        StrategyLeg(long_put, "BUY"),
        StrategyLeg(short_put, "SELL"),
        StrategyLeg(short_call, "SELL"),
        StrategyLeg(long_call, "BUY"),
    )

    return build_record(
        kind=StrategyKind.IRON_CONDOR,
        spread_type="IRON CONDOR",
        strategy_legs=strategy_legs,
        spot=spot,
        fee_per_leg=fee_per_leg,
        net_premium=credit,
        max_profit=credit,
        max_loss=-(max_width - credit),
        breakevens=(short_put.strike - credit, short_call.strike + credit),
        width=max_width,
        config=config,
        cache=cache,
    )
