"""Black-Scholes pricing and sensitivities for European options.

Theta is expressed per trading day (annual theta / 252) and vega per one
volatility point (vega / 100), matching how option desks quote them.
"""

import logging
import math
from dataclasses import dataclass

from scipy.stats import norm

logger = logging.getLogger("spread_screener.pricing")

RISK_FREE_RATE = 0.1075
TRADING_DAYS_PER_YEAR = 252


@dataclass(frozen=True)
class PricingResult:
    """Model price and sensitivities of one option."""

    price: float
    delta: float
    gamma: float
    theta: float
    vega: float


class BlackScholesModel:
    """Black-Scholes model for European options without dividends.

    Degenerate inputs never raise:

    - time_to_expiry <= 0: price is intrinsic value, delta is 1/0 for a
      call (-1/0 for a put) depending on moneyness, other Greeks are 0.
    - spot, strike or vol <= 0: price is intrinsic value and every
      sensitivity is 0.
    """

    @staticmethod
    def intrinsic(spot: float, strike: float, kind: str) -> float:
        if kind == "CALL":
            return max(spot - strike, 0.0)
        return max(strike - spot, 0.0)

    @staticmethod
    def calculate_price(
        spot: float,
        strike: float,
        time_to_expiry: float,
        rate: float,
        vol: float,
        kind: str
    ) -> float:
        """Calculate the theoretical option price.

        Args:
            spot: Current underlying price
            strike: Strike price
            time_to_expiry: Time to expiration in years
            rate: Risk-free interest rate (annualized)
            vol: Volatility (annualized, decimal)
            kind: 'CALL' or 'PUT'

        Returns:
            Option price per unit of underlying
        """
        if BlackScholesModel._is_degenerate(spot, strike, time_to_expiry, vol):
            return BlackScholesModel.intrinsic(spot, strike, kind)

        d1 = BlackScholesModel._d1(spot, strike, time_to_expiry, rate, vol)
        d2 = d1 - vol * math.sqrt(time_to_expiry)
        discount = math.exp(-rate * time_to_expiry)

        if kind == "CALL":
            return spot * norm.cdf(d1) - strike * discount * norm.cdf(d2)
        elif kind == "PUT":
            return strike * discount * norm.cdf(-d2) - spot * norm.cdf(-d1)
        raise ValueError(f"Invalid option kind: {kind}")

    @staticmethod
    def calculate_delta(
        spot: float,
        strike: float,
        time_to_expiry: float,
        rate: float,
        vol: float,
        kind: str
    ) -> float:
        """Calculate delta (N(d1) for calls, N(d1) - 1 for puts).

        Example:
            >>> BlackScholesModel.calculate_delta(100, 105, 0.25, 0.02, 0.25, 'CALL')
            0.42...
        """
        if time_to_expiry <= 0:
            if kind == "CALL":
                return 1.0 if spot > strike else 0.0
            return -1.0 if spot < strike else 0.0

        if spot <= 0 or strike <= 0 or vol <= 0:
            return 0.0

        d1 = BlackScholesModel._d1(spot, strike, time_to_expiry, rate, vol)

        if kind == "CALL":
            return norm.cdf(d1)
        elif kind == "PUT":
            return norm.cdf(d1) - 1.0
        raise ValueError(f"Invalid option kind: {kind}")

    @staticmethod
    def calculate_gamma(
        spot: float,
        strike: float,
        time_to_expiry: float,
        rate: float,
        vol: float
    ) -> float:
        """Calculate gamma (same for calls and puts)."""
        if BlackScholesModel._is_degenerate(spot, strike, time_to_expiry, vol):
            return 0.0

        d1 = BlackScholesModel._d1(spot, strike, time_to_expiry, rate, vol)
        return norm.pdf(d1) / (spot * vol * math.sqrt(time_to_expiry))

    @staticmethod
    def calculate_theta(
        spot: float,
        strike: float,
        time_to_expiry: float,
        rate: float,
        vol: float,
        kind: str
    ) -> float:
        """Calculate theta per trading day.

        Returns:
            Daily theta (typically negative)
        """
        if BlackScholesModel._is_degenerate(spot, strike, time_to_expiry, vol):
            return 0.0

        d1 = BlackScholesModel._d1(spot, strike, time_to_expiry, rate, vol)
        d2 = d1 - vol * math.sqrt(time_to_expiry)
        discount = math.exp(-rate * time_to_expiry)

        term1 = -(spot * norm.pdf(d1) * vol) / (2 * math.sqrt(time_to_expiry))

        if kind == "CALL":
            theta = term1 - rate * strike * discount * norm.cdf(d2)
        elif kind == "PUT":
            theta = term1 + rate * strike * discount * norm.cdf(-d2)
        else:
            raise ValueError(f"Invalid option kind: {kind}")

        return theta / TRADING_DAYS_PER_YEAR

    @staticmethod
    def calculate_vega(
        spot: float,
        strike: float,
        time_to_expiry: float,
        rate: float,
        vol: float
    ) -> float:
        """Calculate vega per one volatility point (0.01 change in vol)."""
        if BlackScholesModel._is_degenerate(spot, strike, time_to_expiry, vol):
            return 0.0

        d1 = BlackScholesModel._d1(spot, strike, time_to_expiry, rate, vol)
        return spot * norm.pdf(d1) * math.sqrt(time_to_expiry) / 100

    @staticmethod
    def evaluate(
        spot: float,
        strike: float,
        time_to_expiry: float,
        rate: float,
        vol: float,
        kind: str
    ) -> PricingResult:
        """Calculate price and all Greeks at once.

        Args:
            spot: Current underlying price
            strike: Strike price
            time_to_expiry: Time to expiration in years
            rate: Risk-free interest rate (annualized)
            vol: Volatility (annualized, decimal)
            kind: 'CALL' or 'PUT'

        Returns:
            PricingResult with price, delta, gamma, theta and vega
        """
        return PricingResult(
            price=BlackScholesModel.calculate_price(spot, strike, time_to_expiry, rate, vol, kind),
            delta=BlackScholesModel.calculate_delta(spot, strike, time_to_expiry, rate, vol, kind),
            gamma=BlackScholesModel.calculate_gamma(spot, strike, time_to_expiry, rate, vol),
            theta=BlackScholesModel.calculate_theta(spot, strike, time_to_expiry, rate, vol, kind),
            vega=BlackScholesModel.calculate_vega(spot, strike, time_to_expiry, rate, vol),
        )

    @staticmethod
    def _is_degenerate(spot: float, strike: float, time_to_expiry: float, vol: float) -> bool:
        return time_to_expiry <= 0 or spot <= 0 or strike <= 0 or vol <= 0

    @staticmethod
    def _d1(spot: float, strike: float, time_to_expiry: float, rate: float, vol: float) -> float:
        """Calculate d1 term in Black-Scholes formula."""
        return (math.log(spot / strike) + (rate + 0.5 * vol ** 2) * time_to_expiry) / \
               (vol * math.sqrt(time_to_expiry))


def price_option(
    spot: float,
    strike: float,
    time_to_expiry: float,
    vol: float,
    kind: str,
    rate: float = RISK_FREE_RATE,
) -> PricingResult:
    """Convenience wrapper around BlackScholesModel.evaluate with the default rate."""
    return BlackScholesModel.evaluate(spot, strike, time_to_expiry, rate, vol, kind)
