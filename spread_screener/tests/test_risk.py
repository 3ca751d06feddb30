"""Tests for rough margin estimates."""

import pytest
from datetime import date

from spread_screener.models.option_leg import OptionLeg
from spread_screener.risk.margin import MarginCalculator
from spread_screener.strategies.box import evaluate_box
from spread_screener.strategies.butterfly import evaluate_short_butterfly
from spread_screener.strategies.iron_condor import evaluate_iron_condor
from spread_screener.strategies.ratio import evaluate_ratio_call, evaluate_ratio_put
from spread_screener.strategies.verticals import evaluate_bear_call, evaluate_bull_call
from spread_screener.strategies.volatility import evaluate_short_straddle

EXP = date(2024, 8, 16)


def make_leg(kind, strike, premium):
    return OptionLeg(
        underlying="PETR4", symbol=f"{kind[0]}{strike}", expiration=EXP,
        business_days=20, kind=kind, strike=strike, premium=premium, implied_vol=0.35,
    )


class TestMarginCalculator:
    """Test suite for MarginCalculator."""

    def test_credit_spread_margin(self):
        assert MarginCalculator.credit_spread_margin(width=2.0, credit=0.90) == pytest.approx(110.0)
        assert MarginCalculator.credit_spread_margin(2.0, 0.90, lot_size=100, quantity=3) == pytest.approx(330.0)

    def test_debit_margin(self):
        assert MarginCalculator.debit_margin(-0.90) == pytest.approx(90.0)

    def test_naked_short_margin_rate(self):
        """15% of spot minus credit when above the 10% floor."""
        assert MarginCalculator.naked_short_margin(spot=100.0, credit=4.0) == pytest.approx(1100.0)

    def test_naked_short_margin_floor(self):
        """Large credits cannot push margin below 10% of spot."""
        assert MarginCalculator.naked_short_margin(spot=100.0, credit=8.0) == pytest.approx(1000.0)

    def test_naked_short_margin_custom_rate(self):
        margin = MarginCalculator.naked_short_margin(spot=100.0, credit=4.0, lot_size=1, naked_rate=0.20)
        assert margin == pytest.approx(16.0)


class TestMarginEstimate:
    """Test suite for MarginCalculator.estimate on evaluated records."""

    def test_credit_vertical(self):
        m = evaluate_bear_call((make_leg("CALL", 28.0, 1.50), make_leg("CALL", 30.0, 0.60)), 28.5)
        assert MarginCalculator.estimate(m) == pytest.approx(110.0)

    def test_debit_vertical(self):
        m = evaluate_bull_call((make_leg("CALL", 28.0, 1.50), make_leg("CALL", 30.0, 0.60)), 28.5)
        assert MarginCalculator.estimate(m, lot_size=10) == pytest.approx(9.0)

    def test_iron_condor_uses_wider_side(self):
        quad = (make_leg("PUT", 24.0, 0.20), make_leg("PUT", 26.0, 0.50),
                make_leg("CALL", 30.0, 0.60), make_leg("CALL", 32.0, 0.25))
        m = evaluate_iron_condor(quad, 28.0)
        assert MarginCalculator.estimate(m) == pytest.approx((2.0 - 0.65) * 100)

    def test_naked_short(self):
        m = evaluate_short_straddle((make_leg("CALL", 100.0, 1.50), make_leg("PUT", 100.0, 2.50)), 100.0)
        assert MarginCalculator.estimate(m) == pytest.approx(1100.0)

    def test_ratio_call_uses_naked_margin(self):
        """Debit 0.30 widens the naked requirement: 0.15 * 28.5 + 0.30."""
        m = evaluate_ratio_call((make_leg("CALL", 28.0, 1.50), make_leg("CALL", 30.0, 0.60)), 28.5)
        assert MarginCalculator.estimate(m) == pytest.approx(457.5)

    def test_ratio_put_covers_downside(self):
        m = evaluate_ratio_put((make_leg("PUT", 26.0, 0.50), make_leg("PUT", 28.0, 0.92)), 28.5)
        assert MarginCalculator.estimate(m) == pytest.approx((26.0 - 2.08) * 100)

    def test_short_butterfly_as_credit_spread(self):
        triple = (make_leg("CALL", 26.0, 2.95), make_leg("CALL", 28.0, 1.50), make_leg("CALL", 30.0, 0.60))
        m = evaluate_short_butterfly(triple, 28.5)
        assert MarginCalculator.estimate(m) == pytest.approx((2.0 - 0.55) * 100)

    def test_box_pays_debit(self):
        quad = (make_leg("CALL", 26.0, 2.95), make_leg("CALL", 30.0, 0.60),
                make_leg("PUT", 26.0, 0.50), make_leg("PUT", 30.0, 1.55))
        m = evaluate_box(quad, 28.0)
        assert MarginCalculator.estimate(m) == pytest.approx(340.0)
