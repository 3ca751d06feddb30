"""Core data models for multi-strategy option screening."""

from .option_leg import Greeks, OptionLeg, legs_from_records
from .strategy import (
    UNBOUNDED,
    StrategyKind,
    StrategyLeg,
    StrategyMetrics,
    is_unbounded,
)

__all__ = [
    "Greeks",
    "OptionLeg",
    "legs_from_records",
    "UNBOUNDED",
    "StrategyKind",
    "StrategyLeg",
    "StrategyMetrics",
    "is_unbounded",
]
