"""Per-leg Greeks resolution and strategy-level aggregation.

Quoted Greeks from the data source are used when present and consistent;
otherwise they are computed from the Black-Scholes model.
"""

import logging
from typing import Iterable, Tuple

from ..models.option_leg import Greeks, OptionLeg
from ..models.strategy import StrategyLeg
from ..utils.cache import GreeksCache
from .pricing import RISK_FREE_RATE, TRADING_DAYS_PER_YEAR, BlackScholesModel

logger = logging.getLogger("spread_screener.greeks")

DEFAULT_FALLBACK_VOL = 0.35


def validate_greeks(leg: OptionLeg, tolerance: float = 0.05) -> Tuple[bool, str]:
    """Validate that quoted Greeks are within sane ranges.

    Args:
        leg: OptionLeg carrying quoted Greeks
        tolerance: Slack allowed on the range checks

    Returns:
        Tuple of (is_valid, error_message)
    """
    if leg.delta is not None:
        if abs(leg.delta) > 1.0 + tolerance:
            return False, f"Delta {leg.delta:.3f} outside valid range [-1, 1]"
        if leg.is_call and leg.delta < -tolerance:
            return False, f"Call option has negative delta: {leg.delta:.3f}"
        if leg.is_put and leg.delta > tolerance:
            return False, f"Put option has positive delta: {leg.delta:.3f}"

    if leg.gamma is not None and leg.gamma < -tolerance:
        return False, f"Gamma should be non-negative, got: {leg.gamma:.3f}"

    if leg.vega is not None and leg.vega < -tolerance:
        return False, f"Vega should be non-negative, got: {leg.vega:.3f}"

    return True, ""


def model_greeks(
    leg: OptionLeg,
    spot: float,
    rate: float = RISK_FREE_RATE,
    fallback_vol: float = DEFAULT_FALLBACK_VOL,
) -> Greeks:
    """Compute Greeks for one leg from the pricing model.

    Time to expiry is business_days / 252. The leg's implied volatility is
    used when positive, otherwise ``fallback_vol``.
    """
    vol = leg.implied_vol if leg.implied_vol is not None and leg.implied_vol > 0 else fallback_vol
    time_to_expiry = leg.business_days / TRADING_DAYS_PER_YEAR

    result = BlackScholesModel.evaluate(
        spot=spot,
        strike=leg.strike if leg.strike is not None else 0.0,
        time_to_expiry=time_to_expiry,
        rate=rate,
        vol=vol,
        kind=leg.kind,
    )
    return Greeks(delta=result.delta, gamma=result.gamma, theta=result.theta, vega=result.vega)


def leg_greeks(
    leg: OptionLeg,
    spot: float,
    rate: float = RISK_FREE_RATE,
    fallback_vol: float = DEFAULT_FALLBACK_VOL,
    cache: GreeksCache | None = None,
) -> Greeks:
    """Get Greeks for one leg, preferring quoted values.

    Args:
        leg: Option leg
        spot: Current underlying price
        rate: Risk-free rate used by the model
        fallback_vol: Volatility used when the leg has no implied vol
        cache: Optional per-scan cache for model results

    Returns:
        Greeks of one long contract unit
    """
    quoted = leg.quoted_greeks
    if quoted is not None:
        is_valid, error = validate_greeks(leg)
        if is_valid:
            return quoted
        logger.warning("Leg %s has invalid quoted Greeks: %s. Using model.", leg.symbol, error)

    if cache is None:
        return model_greeks(leg, spot, rate, fallback_vol)

    return cache.get_or_compute(
        (leg, spot, rate, fallback_vol),
        lambda: model_greeks(leg, spot, rate, fallback_vol),
    )


def aggregate_greeks(
    strategy_legs: Iterable[StrategyLeg],
    spot: float,
    rate: float = RISK_FREE_RATE,
    fallback_vol: float = DEFAULT_FALLBACK_VOL,
    cache: GreeksCache | None = None,
) -> Greeks:
    """Sum leg Greeks weighted by signed quantity (+ bought, - sold).

    Example:
        >>> total = aggregate_greeks([StrategyLeg(call, "BUY"), StrategyLeg(put, "BUY")], 105.0)
    """
    total = Greeks()
    for strategy_leg in strategy_legs:
        greeks = leg_greeks(strategy_leg.leg, spot, rate, fallback_vol, cache)
        total = total + greeks.scaled(strategy_leg.signed_quantity)
    return total
