"""Scale normalization for option chain data.

Some data sources report strikes and premiums in cents rather than in
currency units. Values above a configurable threshold are divided by a
fixed factor so every downstream computation sees a consistent scale.
"""

import logging
from dataclasses import replace
from typing import Any, Dict, Iterable, List

from ..models.option_leg import OptionLeg
from ..utils.error_handling import ConfigurationError

logger = logging.getLogger("spread_screener.normalizer")


class NormalizerConfig:
    """Configuration for scale normalization."""

    def __init__(
        self,
        strike_threshold: float | None = 500.0,
        premium_threshold: float | None = 50.0,
        scale_divisor: float = 100.0,
    ):
        """Initialize normalizer configuration.

        Args:
            strike_threshold: Strikes above this are treated as mis-scaled.
                None disables strike rescaling (needed for high-priced
                underlyings whose real strikes exceed the threshold).
            premium_threshold: Premiums above this are treated as mis-scaled.
                None disables premium rescaling.
            scale_divisor: Factor applied to mis-scaled values
        """
        if scale_divisor <= 0:
            raise ConfigurationError(f"scale_divisor must be positive, got {scale_divisor}")
        self.strike_threshold = strike_threshold
        self.premium_threshold = premium_threshold
        self.scale_divisor = scale_divisor

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "NormalizerConfig":
        """Create NormalizerConfig from dictionary (e.g., from YAML)."""
        return cls(
            strike_threshold=config.get('strike_threshold', 500.0),
            premium_threshold=config.get('premium_threshold', 50.0),
            scale_divisor=config.get('scale_divisor', 100.0),
        )


def normalize_leg(leg: OptionLeg, config: NormalizerConfig | None = None) -> OptionLeg:
    """Return a copy of ``leg`` with strike and premium on the unit scale.

    Legs already marked as normalized are returned unchanged, so applying
    this function twice has the same effect as applying it once.

    Args:
        leg: Raw option leg
        config: Thresholds (defaults to NormalizerConfig())

    Returns:
        Normalized OptionLeg with scale_normalized=True
    """
    if leg.scale_normalized:
        return leg
    config = config or NormalizerConfig()

    strike = leg.strike
    if (config.strike_threshold is not None and strike is not None
            and strike > config.strike_threshold):
        strike = strike / config.scale_divisor
        logger.debug("Rescaled strike of %s: %.2f -> %.2f", leg.symbol, leg.strike, strike)

    premium = leg.premium
    if config.premium_threshold is not None and premium > config.premium_threshold:
        premium = premium / config.scale_divisor
        logger.debug("Rescaled premium of %s: %.2f -> %.2f", leg.symbol, leg.premium, premium)

    return replace(leg, strike=strike, premium=premium, scale_normalized=True)


def normalize_legs(
    legs: Iterable[OptionLeg],
    config: NormalizerConfig | None = None,
) -> List[OptionLeg]:
    """Normalize every leg, preserving input order."""
    config = config or NormalizerConfig()
    return [normalize_leg(leg, config) for leg in legs]
