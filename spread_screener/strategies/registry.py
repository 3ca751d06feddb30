"""Strategy family table: kind -> (candidate generator, evaluator).

Adding a family means adding one row here; the scanner iterates the
table and never inspects candidate types.
"""

from typing import Callable, Dict, Iterable, List, NamedTuple

from ..builders.combinations import (
    GeneratorConfig,
    box_quads,
    cross_type_pairs,
    equidistant_triples,
    same_type_pairs,
    symmetric_quads,
)
from ..models.option_leg import OptionLeg
from ..models.strategy import StrategyKind
from .box import evaluate_box
from .butterfly import evaluate_butterfly, evaluate_short_butterfly
from .iron_condor import evaluate_iron_condor
from .ratio import evaluate_ratio_call, evaluate_ratio_put
from .verticals import (
    evaluate_bear_call,
    evaluate_bear_put,
    evaluate_bull_call,
    evaluate_bull_put,
)
from .volatility import (
    evaluate_long_straddle,
    evaluate_long_strangle,
    evaluate_short_straddle,
    evaluate_short_strangle,
)

CandidateGenerator = Callable[[List[OptionLeg], GeneratorConfig], Iterable[tuple]]


class StrategyFamily(NamedTuple):
    kind: StrategyKind
    generator: str
    evaluator: Callable


GENERATORS: Dict[str, CandidateGenerator] = {
    'call_pairs': lambda legs, config: same_type_pairs(legs, "CALL"),
    'put_pairs': lambda legs, config: same_type_pairs(legs, "PUT"),
    'same_strike_pairs': lambda legs, config: cross_type_pairs(legs, True, config),
    'different_strike_pairs': lambda legs, config: cross_type_pairs(legs, False, config),
    'call_triples': lambda legs, config: equidistant_triples(legs, config, "CALL"),
    'condor_quads': symmetric_quads,
    'box_quads': box_quads,
}

STRATEGY_TABLE: Dict[StrategyKind, StrategyFamily] = {
    family.kind: family
    for family in (
        StrategyFamily(StrategyKind.BULL_CALL_SPREAD, 'call_pairs', evaluate_bull_call),
        StrategyFamily(StrategyKind.BEAR_CALL_SPREAD, 'call_pairs', evaluate_bear_call),
        StrategyFamily(StrategyKind.BULL_PUT_SPREAD, 'put_pairs', evaluate_bull_put),
        StrategyFamily(StrategyKind.BEAR_PUT_SPREAD, 'put_pairs', evaluate_bear_put),
        StrategyFamily(StrategyKind.LONG_STRADDLE, 'same_strike_pairs', evaluate_long_straddle),
        StrategyFamily(StrategyKind.SHORT_STRADDLE, 'same_strike_pairs', evaluate_short_straddle),
        StrategyFamily(StrategyKind.LONG_STRANGLE, 'different_strike_pairs', evaluate_long_strangle),
        StrategyFamily(StrategyKind.SHORT_STRANGLE, 'different_strike_pairs', evaluate_short_strangle),
        StrategyFamily(StrategyKind.BUTTERFLY_CALL, 'call_triples', evaluate_butterfly),
        StrategyFamily(StrategyKind.IRON_CONDOR, 'condor_quads', evaluate_iron_condor),
        StrategyFamily(StrategyKind.RATIO_CALL_SPREAD, 'call_pairs', evaluate_ratio_call),
        StrategyFamily(StrategyKind.RATIO_PUT_SPREAD, 'put_pairs', evaluate_ratio_put),
        StrategyFamily(StrategyKind.SHORT_BUTTERFLY_CALL, 'call_triples', evaluate_short_butterfly),
        StrategyFamily(StrategyKind.BOX_SPREAD, 'box_quads', evaluate_box),
    )
}


def get_family(kind: StrategyKind) -> StrategyFamily:
    """Look up the table row for a strategy kind."""
    return STRATEGY_TABLE[kind]
