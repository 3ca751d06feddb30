"""Straddle and strangle evaluators.

Each takes a (call, put) pair from the cross-type pair generator, which
decides whether the strikes count as the same (straddle) or different
(strangle). Long positions have unbounded profit, short positions have
unbounded loss.
"""

import logging
from typing import Tuple

from ..models.option_leg import OptionLeg
from ..models.strategy import UNBOUNDED, StrategyKind, StrategyLeg, StrategyMetrics
from ..utils.cache import GreeksCache
from .common import EvaluatorConfig, build_record, same_series

logger = logging.getLogger("spread_screener.volatility")

# kind -> (is long, is strangle)
VOLATILITY_SHAPES = {
    StrategyKind.LONG_STRADDLE: (True, False),
    StrategyKind.SHORT_STRADDLE: (False, False),
    StrategyKind.LONG_STRANGLE: (True, True),
    StrategyKind.SHORT_STRANGLE: (False, True),
}


def evaluate_volatility(
    kind: StrategyKind,
    pair: Tuple[OptionLeg, OptionLeg],
    spot: float,
    fee_per_leg: float = 0.0,
    config: EvaluatorConfig | None = None,
    cache: GreeksCache | None = None,
) -> StrategyMetrics | None:
    """Evaluate a straddle or strangle of the given kind.

    Args:
        kind: One of the four straddle/strangle StrategyKinds
        pair: (call leg, put leg)
        spot: Current underlying price
        fee_per_leg: Flat fee per contract leg
        config: Sanity filter thresholds
        cache: Optional per-scan Greeks cache

    Returns:
        StrategyMetrics, or None if the pair fails a check

    Example:
        >>> # CALL 110 @ 1.50, PUT 110 @ 2.50, spot 105
        >>> m = evaluate_volatility(StrategyKind.LONG_STRADDLE, (c110, p110), 105.0)
        >>> m.max_profit, m.breakevens
        ('unbounded', (106.0, 114.0))
    """
    config = config or EvaluatorConfig()
    is_long, is_strangle = VOLATILITY_SHAPES[kind]
    call, put = pair

    if not call.is_call or not put.is_put:
        return None
    if not (call.is_usable and put.is_usable) or not same_series(pair):
        return None

    if is_strangle and put.strike >= call.strike:
        return None

    if (is_long and is_strangle and config.strangle_requires_otm
            and not put.strike <= spot <= call.strike):
        logger.debug("Rejected %s %s/%s: not out of the money at spot %.2f",
                     kind.value, put.strike, call.strike, spot)
        return None

    total = call.premium + put.premium
    if total <= config.min_net_premium:
        logger.debug("Rejected %s: degenerate premium %.4f", kind.value, total)
        return None

    direction = "BUY" if is_long else "SELL"
    strategy_legs = (StrategyLeg(put, direction), StrategyLeg(call, direction))

    if is_long:
        net_premium = -total
        max_profit = UNBOUNDED
        max_loss = -total
    else:
        net_premium = total
        max_profit = total
        max_loss = UNBOUNDED

    return build_record(
        kind=kind,
        spread_type="STRANGLE" if is_strangle else "STRADDLE",
        strategy_legs=strategy_legs,
        spot=spot,
        fee_per_leg=fee_per_leg,
        net_premium=net_premium,
        max_profit=max_profit,
        max_loss=max_loss,
        breakevens=(put.strike - total, call.strike + total),
        width=call.strike - put.strike if is_strangle else None,
        config=config,
        cache=cache,
    )


def evaluate_long_straddle(pair, spot, fee_per_leg=0.0, config=None, cache=None):
    return evaluate_volatility(StrategyKind.LONG_STRADDLE, pair, spot, fee_per_leg, config, cache)


def evaluate_short_straddle(pair, spot, fee_per_leg=0.0, config=None, cache=None):
    return evaluate_volatility(StrategyKind.SHORT_STRADDLE, pair, spot, fee_per_leg, config, cache)


def evaluate_long_strangle(pair, spot, fee_per_leg=0.0, config=None, cache=None):
    return evaluate_volatility(StrategyKind.LONG_STRANGLE, pair, spot, fee_per_leg, config, cache)


def evaluate_short_strangle(pair, spot, fee_per_leg=0.0, config=None, cache=None):
    return evaluate_volatility(StrategyKind.SHORT_STRANGLE, pair, spot, fee_per_leg, config, cache)
