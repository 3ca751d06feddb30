"""1x2 ratio spread evaluators.

Both take a (lower strike, higher strike) pair of the same option kind.
The ratio call buys one lower call and sells two higher calls, leaving one
naked call with unbounded upside loss. The ratio put buys one higher put
and sells two lower puts; its downside loss is large but bounded because
the underlying cannot fall below zero.
"""

import logging
from typing import Tuple

from ..models.option_leg import OptionLeg
from ..models.strategy import UNBOUNDED, StrategyKind, StrategyLeg, StrategyMetrics
from ..utils.cache import GreeksCache
from .common import EvaluatorConfig, build_record, same_series

logger = logging.getLogger("spread_screener.ratio")

RATIO = 2


def _usable_pair(pair: Tuple[OptionLeg, OptionLeg], option_kind: str) -> bool:
    low, high = pair
    if low.kind != option_kind or high.kind != option_kind:
        return False
    if not (low.is_usable and high.is_usable) or not same_series(pair):
        return False
    return high.strike > low.strike


def evaluate_ratio_call(
    pair: Tuple[OptionLeg, OptionLeg],
    spot: float,
    fee_per_leg: float = 0.0,
    config: EvaluatorConfig | None = None,
    cache: GreeksCache | None = None,
) -> StrategyMetrics | None:
    """Evaluate a 1x2 call ratio spread: buy 1 lower call, sell 2 higher calls.

    Max profit (width + net premium) is reached at the higher strike. Loss
    is unbounded above the upper breakeven. A debit entry adds a lower
    breakeven at low strike + debit.

    Example:
        >>> # CALL 28 @ 1.50, CALL 30 @ 0.60 -> debit 0.30, max profit 1.70
        >>> m = evaluate_ratio_call((c28, c30), 28.5)
        >>> # breakevens 28.30 and 31.70, max_loss 'unbounded'
    """
    config = config or EvaluatorConfig()
    if not _usable_pair(pair, "CALL"):
        return None
    low, high = pair

    width = high.strike - low.strike
    net_premium = RATIO * high.premium - low.premium
    max_profit = width + net_premium

    if max_profit <= config.min_net_premium:
        logger.debug("Rejected ratio call %s/%s: no profit zone (net %.2f, width %.2f)",
                     low.strike, high.strike, net_premium, width)
        return None

    breakevens = (high.strike + max_profit,)
    if net_premium < 0:
        breakevens = (low.strike - net_premium,) + breakevens

    strategy_legs = (
        StrategyLeg(low, "BUY"),
        StrategyLeg(high, "SELL", quantity=RATIO),
    )

    return build_record(
        kind=StrategyKind.RATIO_CALL_SPREAD,
        spread_type="RATIO CALL SPREAD",
        strategy_legs=strategy_legs,
        spot=spot,
        fee_per_leg=fee_per_leg,
        net_premium=net_premium,
        max_profit=max_profit,
        max_loss=UNBOUNDED,
        breakevens=breakevens,
        width=width,
        config=config,
        cache=cache,
    )


def evaluate_ratio_put(
    pair: Tuple[OptionLeg, OptionLeg],
    spot: float,
    fee_per_leg: float = 0.0,
    config: EvaluatorConfig | None = None,
    cache: GreeksCache | None = None,
) -> StrategyMetrics | None:
    """Evaluate a 1x2 put ratio spread: buy 1 higher put, sell 2 lower puts.

    Args:
        pair: (lower strike put, higher strike put)
        spot: Current underlying price
        fee_per_leg: Flat fee per contract leg
        config: Sanity filter thresholds
        cache: Optional per-scan Greeks cache

    Returns:
        StrategyMetrics, or None if the pair fails a check

    Max profit (width + net premium) is reached at the lower strike. The
    worst case is the larger of the debit paid (above the higher strike)
    and the loss with the underlying at zero.
    """
    config = config or EvaluatorConfig()
    if not _usable_pair(pair, "PUT"):
        return None
    low, high = pair

    width = high.strike - low.strike
    net_premium = RATIO * low.premium - high.premium
    max_profit = width + net_premium

    if max_profit <= config.min_net_premium:
        logger.debug("Rejected ratio put %s/%s: no profit zone (net %.2f, width %.2f)",
                     low.strike, high.strike, net_premium, width)
        return None

    payoff_at_zero = max_profit - low.strike
    max_loss = min(net_premium, payoff_at_zero)
    if max_loss >= 0:
        logger.debug("Rejected ratio put %s/%s: no downside, quotes likely stale",
                     low.strike, high.strike)
        return None

    breakevens = ()
    if payoff_at_zero < 0:
        breakevens += (low.strike - max_profit,)
    if net_premium < 0:
        breakevens += (high.strike + net_premium,)

    strategy_legs = (
        StrategyLeg(low, "SELL", quantity=RATIO),
        StrategyLeg(high, "BUY"),
    )

    return build_record(
        kind=StrategyKind.RATIO_PUT_SPREAD,
        spread_type="RATIO PUT SPREAD",
        strategy_legs=strategy_legs,
        spot=spot,
        fee_per_leg=fee_per_leg,
        net_premium=net_premium,
        max_profit=max_profit,
        max_loss=max_loss,
        breakevens=breakevens,
        width=width,
        config=config,
        cache=cache,
    )
