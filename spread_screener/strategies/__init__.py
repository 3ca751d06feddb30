"""Strategy family evaluators, the family table and position recognition."""

from .common import EvaluatorConfig
from .recognition import identify_strategy
from .registry import STRATEGY_TABLE, StrategyFamily, get_family

__all__ = ["EvaluatorConfig", "identify_strategy", "STRATEGY_TABLE", "StrategyFamily", "get_family"]
