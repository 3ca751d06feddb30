"""Box spread evaluator."""

import logging
from typing import Tuple

from ..models.option_leg import OptionLeg
from ..models.strategy import StrategyKind, StrategyLeg, StrategyMetrics
from ..utils.cache import GreeksCache
from .common import EvaluatorConfig, build_record, same_series

logger = logging.getLogger("spread_screener.box")


def evaluate_box(
    quad: Tuple[OptionLeg, OptionLeg, OptionLeg, OptionLeg],
    spot: float,
    fee_per_leg: float = 0.0,
    config: EvaluatorConfig | None = None,
    cache: GreeksCache | None = None,
) -> StrategyMetrics | None:
    """Evaluate a long box: bull call spread plus bear put spread on two strikes.

    The position is worth exactly the strike width at expiration wherever
    the underlying ends, so it is only kept when it costs less than the
    width. Max profit is width - cost and the expiry payoff never goes
    negative, so max loss is 0 and there are no breakevens.

    Args:
        quad: (low call, high call, low put, high put), calls and puts on
            the same two strikes
        spot: Current underlying price
        fee_per_leg: Flat fee per contract leg
        config: Sanity filter thresholds
        cache: Optional per-scan Greeks cache

    Returns:
        StrategyMetrics, or None if the quad fails a check
    """
    config = config or EvaluatorConfig()
    low_call, high_call, low_put, high_put = quad

    if not (low_call.is_call and high_call.is_call and low_put.is_put and high_put.is_put):
        return None
    if not all(leg.is_usable for leg in quad) or not same_series(quad):
        return None
    if low_call.strike != low_put.strike or high_call.strike != high_put.strike:
        return None

    width = high_call.strike - low_call.strike
    if width <= 0:
        return None

    cost = (low_call.premium - high_call.premium) + (high_put.premium - low_put.premium)
    if cost <= config.min_net_premium:
        logger.debug("Rejected box %s/%s: degenerate cost %.4f", low_call.strike, high_call.strike, cost)
        return None

    max_profit = width - cost
    if max_profit <= config.min_net_premium:
        logger.debug("Rejected box %s/%s: cost %.2f not below width %.2f",
                     low_call.strike, high_call.strike, cost, width)
        return None

    strategy_legs = (
        StrategyLeg(low_call, "BUY"),
        StrategyLeg(high_call, "SELL"),
        StrategyLeg(low_put, "SELL"),
        StrategyLeg(high_put, "BUY"),
    )

    return build_record(
        kind=StrategyKind.BOX_SPREAD,
        spread_type="BOX SPREAD",
        strategy_legs=strategy_legs,
        spot=spot,
        fee_per_leg=fee_per_leg,
        net_premium=-cost,
        max_profit=max_profit,
        max_loss=0.0,
        breakevens=(),
        width=width,
        config=config,
        cache=cache,
    )
