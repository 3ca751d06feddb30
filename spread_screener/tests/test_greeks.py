"""Tests for per-leg Greeks resolution and aggregation.

Tests quoted-greek validation, model fallback and signed aggregation.
"""

import pytest
from datetime import date

from spread_screener.analytics.greeks import (
    DEFAULT_FALLBACK_VOL,
    aggregate_greeks,
    leg_greeks,
    model_greeks,
    validate_greeks,
)
from spread_screener.analytics.pricing import BlackScholesModel, RISK_FREE_RATE
from spread_screener.models.option_leg import Greeks, OptionLeg
from spread_screener.models.strategy import StrategyLeg
from spread_screener.utils.cache import GreeksCache


def make_leg(kind="CALL", strike=28.0, premium=1.50, **kwargs):
    defaults = dict(
        underlying="PETR4", symbol=f"PETR{kind[0]}{strike:.0f}", expiration=date(2024, 8, 16),
        business_days=21, kind=kind, strike=strike, premium=premium,
    )
    defaults.update(kwargs)
    return OptionLeg(**defaults)


class TestValidateGreeks:
    """Test suite for quoted-greek validation."""

    def test_valid_call(self):
        assert validate_greeks(make_leg(delta=0.55, gamma=0.1, vega=0.03)) == (True, "")

    def test_delta_out_of_range(self):
        is_valid, error = validate_greeks(make_leg(delta=1.5))
        assert not is_valid
        assert "outside" in error

    def test_call_negative_delta(self):
        assert validate_greeks(make_leg(delta=-0.4))[0] is False

    def test_put_positive_delta(self):
        assert validate_greeks(make_leg(kind="PUT", delta=0.4))[0] is False

    def test_negative_gamma(self):
        assert validate_greeks(make_leg(delta=0.5, gamma=-0.5))[0] is False

    def test_no_quotes_is_valid(self):
        assert validate_greeks(make_leg())[0] is True


class TestLegGreeks:
    """Test suite for leg_greeks."""

    def test_uses_quoted_values(self):
        leg = make_leg(delta=0.55, gamma=0.12, theta=-0.02, vega=0.04)
        assert leg_greeks(leg, 28.5) == Greeks(delta=0.55, gamma=0.12, theta=-0.02, vega=0.04)

    def test_zero_quotes_use_model(self):
        """All-zero quotes are treated as missing."""
        leg = make_leg(delta=0.0, gamma=0.0, theta=0.0, vega=0.0, implied_vol=0.30)
        greeks = leg_greeks(leg, 28.5)
        assert greeks.delta > 0.5
        assert greeks == model_greeks(leg, 28.5)

    def test_invalid_quotes_use_model(self, caplog):
        leg = make_leg(delta=2.0, implied_vol=0.30)
        with caplog.at_level("WARNING"):
            greeks = leg_greeks(leg, 28.5)
        assert 0 < greeks.delta < 1
        assert "invalid quoted Greeks" in caplog.text

    def test_model_uses_business_day_time(self):
        leg = make_leg(implied_vol=0.30)
        expected = BlackScholesModel.calculate_delta(28.5, 28.0, 21 / 252, RISK_FREE_RATE, 0.30, "CALL")
        assert model_greeks(leg, 28.5).delta == pytest.approx(expected)

    def test_fallback_vol_when_missing(self):
        leg = make_leg(implied_vol=None)
        expected = BlackScholesModel.calculate_vega(
            28.5, 28.0, 21 / 252, RISK_FREE_RATE, DEFAULT_FALLBACK_VOL
        )
        assert model_greeks(leg, 28.5).vega == pytest.approx(expected)

    def test_expired_leg(self):
        leg = make_leg(business_days=0)
        greeks = model_greeks(leg, 30.0)
        assert greeks == Greeks(delta=1.0, gamma=0.0, theta=0.0, vega=0.0)

    def test_cache_reuse(self):
        cache = GreeksCache()
        leg = make_leg(implied_vol=0.30)

        first = leg_greeks(leg, 28.5, cache=cache)
        second = leg_greeks(leg, 28.5, cache=cache)

        assert first == second
        assert cache.stats()['hits'] == 1
        assert cache.stats()['misses'] == 1


class TestAggregateGreeks:
    """Test suite for aggregate_greeks."""

    def test_long_and_short_cancel(self):
        leg = make_leg(delta=0.5, gamma=0.1, theta=-0.02, vega=0.04)
        total = aggregate_greeks([StrategyLeg(leg, "BUY"), StrategyLeg(leg, "SELL")], 28.5)
        assert total.delta == pytest.approx(0.0)
        assert total.vega == pytest.approx(0.0)

    def test_vertical_sign(self):
        low = make_leg(strike=28.0, delta=0.55)
        high = make_leg(strike=30.0, delta=0.25)
        total = aggregate_greeks([StrategyLeg(low, "BUY"), StrategyLeg(high, "SELL")], 28.5)
        assert total.delta == pytest.approx(0.30)

    def test_quantity_weighting(self):
        """Butterfly body counts twice."""
        low = make_leg(strike=26.0, delta=0.80)
        mid = make_leg(strike=28.0, delta=0.50)
        high = make_leg(strike=30.0, delta=0.25)
        total = aggregate_greeks(
            [StrategyLeg(low, "BUY"), StrategyLeg(mid, "SELL", quantity=2), StrategyLeg(high, "BUY")],
            28.5,
        )
        assert total.delta == pytest.approx(0.80 - 1.00 + 0.25)

    def test_empty(self):
        assert aggregate_greeks([], 28.5) == Greeks()
