"""Vertical spread evaluators (bull/bear, call/put).

All four variants take a (lower strike, higher strike) pair of the same
option kind. Bullish spreads buy the lower strike, bearish spreads buy
the higher strike.
"""

import logging
from typing import Tuple

from ..models.option_leg import OptionLeg
from ..models.strategy import StrategyKind, StrategyLeg, StrategyMetrics
from ..utils.cache import GreeksCache
from .common import EvaluatorConfig, build_record, credit_within_width, same_series

logger = logging.getLogger("spread_screener.verticals")

# kind -> (option kind, buys lower strike)
VERTICAL_SHAPES = {
    StrategyKind.BULL_CALL_SPREAD: ("CALL", True),
    StrategyKind.BEAR_CALL_SPREAD: ("CALL", False),
    StrategyKind.BULL_PUT_SPREAD: ("PUT", True),
    StrategyKind.BEAR_PUT_SPREAD: ("PUT", False),
}


def evaluate_vertical(
    kind: StrategyKind,
    pair: Tuple[OptionLeg, OptionLeg],
    spot: float,
    fee_per_leg: float = 0.0,
    config: EvaluatorConfig | None = None,
    cache: GreeksCache | None = None,
) -> StrategyMetrics | None:
    """Evaluate a vertical spread of the given kind.

    Args:
        kind: One of the four vertical StrategyKinds
        pair: (lower strike leg, higher strike leg)
        spot: Current underlying price
        fee_per_leg: Flat fee per contract leg
        config: Sanity filter thresholds
        cache: Optional per-scan Greeks cache

    Returns:
        StrategyMetrics, or None if the pair fails a structural or
        economic check

    Example:
        >>> # CALL 28 @ 1.50, CALL 30 @ 0.60
        >>> m = evaluate_vertical(StrategyKind.BULL_CALL_SPREAD, (c28, c30), 28.5)
        >>> # net_premium -0.90, max_profit 1.10, max_loss -0.90, breakeven 28.90
    """
    config = config or EvaluatorConfig()
    option_kind, buys_lower = VERTICAL_SHAPES[kind]
    low, high = pair

    if low.kind != option_kind or high.kind != option_kind:
        return None
    if not (low.is_usable and high.is_usable) or not same_series(pair):
        return None

    width = high.strike - low.strike
    if width <= 0:
        return None

    bought, sold = (low, high) if buys_lower else (high, low)
    net_premium = sold.premium - bought.premium
    is_credit = net_premium > 0
    amount = abs(net_premium)

    if amount <= config.min_net_premium:
        logger.debug("Rejected %s %s: degenerate premium %.4f", kind.value, low.symbol, net_premium)
        return None

    # Credit spreads must sell the more valuable leg, debit spreads buy it
    expected_credit = (option_kind == "CALL") != buys_lower
    if is_credit != expected_credit:
        return None

    if is_credit:
        if not credit_within_width(amount, width, config):
            logger.debug("Rejected %s: credit %.2f exceeds %.0f%% of width %.2f",
                         kind.value, amount, config.max_credit_ratio * 100, width)
            return None
        max_profit = amount
        max_loss = -(width - amount)
    else:
        if amount >= width:
            return None
        max_profit = width - amount
        max_loss = -amount

    if option_kind == "CALL":
        breakeven = low.strike + amount
    else:
        breakeven = high.strike - amount

    strategy_legs = (
        StrategyLeg(low, "BUY" if buys_lower else "SELL"),
        StrategyLeg(high, "SELL" if buys_lower else "BUY"),
    )

    return build_record(
        kind=kind,
        spread_type=f"VERTICAL {option_kind}",
        strategy_legs=strategy_legs,
        spot=spot,
        fee_per_leg=fee_per_leg,
        net_premium=net_premium,
        max_profit=max_profit,
        max_loss=max_loss,
        breakevens=(breakeven,),
        width=width,
        config=config,
        cache=cache,
    )


def evaluate_bull_call(pair, spot, fee_per_leg=0.0, config=None, cache=None):
    return evaluate_vertical(StrategyKind.BULL_CALL_SPREAD, pair, spot, fee_per_leg, config, cache)


def evaluate_bear_call(pair, spot, fee_per_leg=0.0, config=None, cache=None):
    return evaluate_vertical(StrategyKind.BEAR_CALL_SPREAD, pair, spot, fee_per_leg, config, cache)


def evaluate_bull_put(pair, spot, fee_per_leg=0.0, config=None, cache=None):
    return evaluate_vertical(StrategyKind.BULL_PUT_SPREAD, pair, spot, fee_per_leg, config, cache)


def evaluate_bear_put(pair, spot, fee_per_leg=0.0, config=None, cache=None):
    return evaluate_vertical(StrategyKind.BEAR_PUT_SPREAD, pair, spot, fee_per_leg, config, cache)
