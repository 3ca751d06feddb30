"""Tests for the Black-Scholes pricing model.

Tests prices, Greeks scaling conventions and degenerate inputs.
"""

import math
import pytest

from spread_screener.analytics.pricing import (
    RISK_FREE_RATE,
    BlackScholesModel,
    PricingResult,
    price_option,
)


class TestBlackScholesPrice:
    """Test suite for option prices."""

    def test_put_call_parity(self):
        """C - P = S - K * exp(-rT)."""
        spot, strike, t, rate, vol = 100.0, 105.0, 0.5, 0.05, 0.30
        call = BlackScholesModel.calculate_price(spot, strike, t, rate, vol, "CALL")
        put = BlackScholesModel.calculate_price(spot, strike, t, rate, vol, "PUT")

        assert call - put == pytest.approx(spot - strike * math.exp(-rate * t), abs=1e-9)

    def test_known_value(self):
        """Textbook case: S=K=100, T=1, r=5%, vol=20% -> call ~10.45."""
        call = BlackScholesModel.calculate_price(100.0, 100.0, 1.0, 0.05, 0.20, "CALL")
        assert call == pytest.approx(10.4506, abs=1e-3)

    def test_price_at_least_intrinsic_for_call(self):
        call = BlackScholesModel.calculate_price(120.0, 100.0, 0.25, 0.05, 0.25, "CALL")
        assert call >= 20.0

    def test_expired_price_is_intrinsic(self):
        assert BlackScholesModel.calculate_price(110.0, 100.0, 0.0, 0.05, 0.2, "CALL") == 10.0
        assert BlackScholesModel.calculate_price(110.0, 100.0, 0.0, 0.05, 0.2, "PUT") == 0.0

    def test_invalid_kind_raises(self):
        with pytest.raises(ValueError):
            BlackScholesModel.calculate_price(100.0, 100.0, 0.5, 0.05, 0.2, "FORWARD")


class TestBlackScholesGreeks:
    """Test suite for sensitivities."""

    def test_atm_call_delta_approximately_half(self):
        delta = BlackScholesModel.calculate_delta(100.0, 100.0, 0.25, 0.02, 0.25, "CALL")
        assert 0.45 <= delta <= 0.60

    def test_put_delta_is_call_delta_minus_one(self):
        call = BlackScholesModel.calculate_delta(100.0, 95.0, 0.25, 0.1075, 0.35, "CALL")
        put = BlackScholesModel.calculate_delta(100.0, 95.0, 0.25, 0.1075, 0.35, "PUT")
        assert put == pytest.approx(call - 1.0)

    def test_gamma_positive(self):
        assert BlackScholesModel.calculate_gamma(100.0, 100.0, 0.25, 0.02, 0.25) > 0

    def test_theta_is_daily(self):
        """Theta is annual theta divided by 252 trading days."""
        daily = BlackScholesModel.calculate_theta(100.0, 100.0, 1.0, 0.05, 0.20, "CALL")
        # Annual theta for this textbook case is about -6.41
        assert daily == pytest.approx(-6.414 / 252, rel=1e-2)

    def test_vega_per_vol_point(self):
        """Vega is per 1% volatility move."""
        vega = BlackScholesModel.calculate_vega(100.0, 100.0, 1.0, 0.05, 0.20)
        # Raw vega for this case is about 37.52
        assert vega == pytest.approx(0.3752, rel=1e-2)

    def test_vega_matches_finite_difference(self):
        args = (100.0, 95.0, 0.3, 0.1075)
        up = BlackScholesModel.calculate_price(*args, 0.36, "CALL")
        down = BlackScholesModel.calculate_price(*args, 0.34, "CALL")
        vega = BlackScholesModel.calculate_vega(*args, 0.35)
        assert vega == pytest.approx((up - down) / 2, rel=1e-3)

    def test_expired_delta_by_moneyness(self):
        """At T <= 0 delta collapses to 0/1 (calls) or -1/0 (puts)."""
        assert BlackScholesModel.calculate_delta(110.0, 100.0, 0.0, 0.05, 0.2, "CALL") == 1.0
        assert BlackScholesModel.calculate_delta(90.0, 100.0, 0.0, 0.05, 0.2, "CALL") == 0.0
        assert BlackScholesModel.calculate_delta(90.0, 100.0, -1.0, 0.05, 0.2, "PUT") == -1.0
        assert BlackScholesModel.calculate_delta(110.0, 100.0, 0.0, 0.05, 0.2, "PUT") == 0.0

    @pytest.mark.parametrize("spot,strike,vol", [
        (0.0, 100.0, 0.2),
        (100.0, 0.0, 0.2),
        (100.0, 100.0, 0.0),
        (-5.0, 100.0, 0.2),
    ])
    def test_degenerate_inputs_zero_sensitivities(self, spot, strike, vol):
        """Non-positive spot, strike or vol never raise and give zero Greeks."""
        result = BlackScholesModel.evaluate(spot, strike, 0.5, 0.05, vol, "CALL")

        assert result.delta == 0.0
        assert result.gamma == 0.0
        assert result.theta == 0.0
        assert result.vega == 0.0
        assert not math.isnan(result.price)

    def test_expired_other_greeks_zero(self):
        result = BlackScholesModel.evaluate(110.0, 100.0, 0.0, 0.05, 0.2, "CALL")
        assert result == PricingResult(price=10.0, delta=1.0, gamma=0.0, theta=0.0, vega=0.0)


class TestPriceOption:
    """Test suite for the convenience wrapper."""

    def test_default_rate(self):
        wrapped = price_option(28.5, 28.0, 20 / 252, 0.35, "CALL")
        direct = BlackScholesModel.evaluate(28.5, 28.0, 20 / 252, RISK_FREE_RATE, 0.35, "CALL")
        assert wrapped == direct
        assert RISK_FREE_RATE == 0.1075
