"""Classify a manually assembled position into a strategy kind."""

from typing import Sequence

from ..builders.combinations import is_same_strike
from ..models.strategy import StrategyKind, StrategyLeg


def identify_strategy(
    strategy_legs: Sequence[StrategyLeg],
    same_strike_tolerance: float = 0.01,
) -> StrategyKind | None:
    """Recognize the strategy family formed by a set of legs.

    Recognition is by leg count, option kinds, directions and strike
    ordering. Positions spanning more than one expiration or underlying
    are not recognized.

    Args:
        strategy_legs: Legs of the position, in any order
        same_strike_tolerance: Relative band for straddle strikes

    Returns:
        StrategyKind, or None if the legs form no supported family

    Example:
        >>> identify_strategy([StrategyLeg(c28, "BUY"), StrategyLeg(c30, "SELL")])
        <StrategyKind.BULL_CALL_SPREAD: 'Bull Call Spread'>
    """
    if not strategy_legs:
        return None
    if any(sl.leg.strike is None for sl in strategy_legs):
        return None
    if len({sl.leg.series_key for sl in strategy_legs}) != 1:
        return None

    ordered = sorted(strategy_legs, key=lambda sl: sl.leg.strike)
    calls = [sl for sl in ordered if sl.leg.is_call]
    puts = [sl for sl in ordered if sl.leg.is_put]

    if len(ordered) == 2:
        return _identify_two_legs(calls, puts, same_strike_tolerance)
    if len(ordered) == 3 and len(calls) == 3:
        return _identify_butterfly(calls)
    if len(ordered) == 4 and len(calls) == 2 and len(puts) == 2:
        if len({sl.leg.strike for sl in ordered}) == 2:
            return _identify_box(calls, puts)
        return _identify_iron_condor(calls, puts)
    return None


def _identify_two_legs(calls, puts, tolerance) -> StrategyKind | None:
    quantities = sorted(sl.quantity for sl in calls + puts)
    if quantities == [1, 2]:
        return _identify_ratio(calls, puts)
    if quantities != [1, 1]:
        return None

    # Vertical: same kind, one bought and one sold
    if len(calls) == 2 or len(puts) == 2:
        low, high = calls if calls else puts
        if low.direction == high.direction or low.leg.strike == high.leg.strike:
            return None
        buys_lower = low.direction == "BUY"
        if calls:
            return StrategyKind.BULL_CALL_SPREAD if buys_lower else StrategyKind.BEAR_CALL_SPREAD
        return StrategyKind.BULL_PUT_SPREAD if buys_lower else StrategyKind.BEAR_PUT_SPREAD

    call, put = calls[0], puts[0]
    if call.direction != put.direction:
        return None
    is_long = call.direction == "BUY"

    if is_same_strike(call.leg.strike, put.leg.strike, tolerance):
        return StrategyKind.LONG_STRADDLE if is_long else StrategyKind.SHORT_STRADDLE
    if put.leg.strike < call.leg.strike:
        return StrategyKind.LONG_STRANGLE if is_long else StrategyKind.SHORT_STRANGLE
    return None


def _identify_ratio(calls, puts) -> StrategyKind | None:
    # One bought, two sold further out of the money
    if len(calls) == 2:
        bought, sold = calls
        kind = StrategyKind.RATIO_CALL_SPREAD
    elif len(puts) == 2:
        sold, bought = puts
        kind = StrategyKind.RATIO_PUT_SPREAD
    else:
        return None
    if bought.leg.strike == sold.leg.strike:
        return None
    if (bought.direction, bought.quantity, sold.direction, sold.quantity) != ("BUY", 1, "SELL", 2):
        return None
    return kind


def _identify_butterfly(calls) -> StrategyKind | None:
    low, mid, high = calls
    if low.quantity != 1 or high.quantity != 1 or mid.quantity != 2:
        return None
    if not low.leg.strike < mid.leg.strike < high.leg.strike:
        return None
    directions = (low.direction, mid.direction, high.direction)
    if directions == ("BUY", "SELL", "BUY"):
        return StrategyKind.BUTTERFLY_CALL
    if directions == ("SELL", "BUY", "SELL"):
        return StrategyKind.SHORT_BUTTERFLY_CALL
    return None


def _identify_box(calls, puts) -> StrategyKind | None:
    low_call, high_call = calls
    low_put, high_put = puts
    if any(sl.quantity != 1 for sl in calls + puts):
        return None
    if low_call.leg.strike != low_put.leg.strike or high_call.leg.strike != high_put.leg.strike:
        return None
    if not low_call.leg.strike < high_call.leg.strike:
        return None
    directions = (low_call.direction, high_call.direction, low_put.direction, high_put.direction)
    if directions != ("BUY", "SELL", "SELL", "BUY"):
        return None
    return StrategyKind.BOX_SPREAD


def _identify_iron_condor(calls, puts) -> StrategyKind | None:
    long_put, short_put = puts
    short_call, long_call = calls
    directions = (long_put.direction, short_put.direction, short_call.direction, long_call.direction)
    if directions != ("BUY", "SELL", "SELL", "BUY"):
        return None
    if any(sl.quantity != 1 for sl in calls + puts):
        return None
    if not long_put.leg.strike < short_put.leg.strike < short_call.leg.strike < long_call.leg.strike:
        return None
    return StrategyKind.IRON_CONDOR
