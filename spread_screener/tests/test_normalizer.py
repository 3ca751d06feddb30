"""Tests for leg scale normalization and usability filtering."""

import pytest
from datetime import date

from spread_screener.data.normalizer import NormalizerConfig, normalize_leg, normalize_legs
from spread_screener.data.validators import filter_usable_legs
from spread_screener.models.option_leg import OptionLeg
from spread_screener.utils.error_handling import ConfigurationError


def make_leg(strike=28.0, premium=1.50, **kwargs):
    defaults = dict(
        underlying="PETR4", symbol="PETRH280", expiration=date(2024, 8, 16),
        business_days=20, kind="CALL", strike=strike, premium=premium,
    )
    defaults.update(kwargs)
    return OptionLeg(**defaults)


class TestNormalizerConfig:
    """Test suite for NormalizerConfig."""

    def test_defaults(self):
        config = NormalizerConfig()
        assert config.strike_threshold == 500.0
        assert config.premium_threshold == 50.0
        assert config.scale_divisor == 100.0

    def test_from_dict(self):
        config = NormalizerConfig.from_dict({'strike_threshold': None, 'premium_threshold': 80.0})
        assert config.strike_threshold is None
        assert config.premium_threshold == 80.0

    def test_invalid_divisor(self):
        with pytest.raises(ConfigurationError):
            NormalizerConfig(scale_divisor=0)


class TestNormalizeLeg:
    """Test suite for normalize_leg."""

    def test_rescales_cent_strike(self):
        """A strike of 2800 is read as 28.00."""
        leg = normalize_leg(make_leg(strike=2800.0))
        assert leg.strike == pytest.approx(28.0)
        assert leg.scale_normalized

    def test_rescales_cent_premium(self):
        """A premium of 150 is read as 1.50."""
        leg = normalize_leg(make_leg(premium=150.0))
        assert leg.premium == pytest.approx(1.50)

    def test_leaves_normal_values(self):
        leg = normalize_leg(make_leg())
        assert leg.strike == 28.0
        assert leg.premium == 1.50
        assert leg.scale_normalized

    def test_idempotent(self):
        """Normalizing twice equals normalizing once."""
        raw = make_leg(strike=2800.0, premium=150.0)
        once = normalize_leg(raw)
        twice = normalize_leg(once)
        assert twice == once
        assert twice.strike == pytest.approx(28.0)

    def test_idempotent_near_threshold(self):
        """A value rescaled to above the threshold is not divided again."""
        config = NormalizerConfig(strike_threshold=5.0)
        once = normalize_leg(make_leg(strike=1000.0), config)
        assert normalize_leg(once, config).strike == pytest.approx(10.0)

    def test_missing_strike_passes_through(self):
        leg = normalize_leg(make_leg(strike=None))
        assert leg.strike is None

    def test_disabled_threshold(self):
        """High-priced underlyings can turn strike rescaling off."""
        config = NormalizerConfig(strike_threshold=None)
        assert normalize_leg(make_leg(strike=570.0), config).strike == 570.0

    def test_normalize_legs_preserves_order(self):
        legs = [make_leg(strike=3000.0, symbol="A"), make_leg(strike=28.0, symbol="B")]
        result = normalize_legs(legs)
        assert [leg.symbol for leg in result] == ["A", "B"]
        assert [leg.strike for leg in result] == [pytest.approx(30.0), 28.0]


class TestFilterUsableLegs:
    """Test suite for filter_usable_legs."""

    def test_rejects_unusable(self):
        legs = [
            make_leg(symbol="OK"),
            make_leg(symbol="NOSTRIKE", strike=None),
            make_leg(symbol="ZERO", strike=0.0),
            make_leg(symbol="NOPREMIUM", premium=0.0),
        ]
        assert [leg.symbol for leg in filter_usable_legs(legs)] == ["OK"]

    def test_accepts_generator_input(self):
        result = filter_usable_legs(make_leg(symbol=str(i)) for i in range(3))
        assert len(result) == 3
