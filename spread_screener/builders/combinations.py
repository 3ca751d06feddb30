"""Candidate leg combination generators.

Every generator groups legs by (underlying, expiration) so a candidate
never mixes series, sorts each group by strike, and yields tuples lazily.
Unusable legs (missing or non-positive strike, non-positive premium) are
skipped.
"""

from collections import defaultdict
from typing import Any, Dict, Iterator, List, Tuple

from ..models.option_leg import OptionLeg
from ..utils.error_handling import ConfigurationError

SeriesKey = Tuple[str, Any]


class GeneratorConfig:
    """Configuration for candidate generation tolerances."""

    def __init__(
        self,
        same_strike_tolerance: float = 0.01,
        butterfly_gap_tolerance: float = 0.05,
        condor_max_width_asymmetry: float = 0.5,
    ):
        """Initialize generator configuration.

        Args:
            same_strike_tolerance: Relative band (fraction of the call strike)
                inside which a call and a put count as the same strike
            butterfly_gap_tolerance: Maximum absolute difference between the
                lower and upper strike gaps of a butterfly
            condor_max_width_asymmetry: Maximum difference between the put and
                call side widths as a fraction of the wider side
        """
        if same_strike_tolerance < 0:
            raise ConfigurationError(
                f"same_strike_tolerance must be non-negative, got {same_strike_tolerance}"
            )
        if butterfly_gap_tolerance < 0:
            raise ConfigurationError(
                f"butterfly_gap_tolerance must be non-negative, got {butterfly_gap_tolerance}"
            )
        if not 0 <= condor_max_width_asymmetry <= 1:
            raise ConfigurationError(
                f"condor_max_width_asymmetry must be in [0, 1], got {condor_max_width_asymmetry}"
            )
        self.same_strike_tolerance = same_strike_tolerance
        self.butterfly_gap_tolerance = butterfly_gap_tolerance
        self.condor_max_width_asymmetry = condor_max_width_asymmetry

    @classmethod
    def from_dict(cls, config: Dict) -> "GeneratorConfig":
        """Create GeneratorConfig from dictionary (e.g., from YAML)."""
        return cls(
            same_strike_tolerance=config.get('same_strike_tolerance', 0.01),
            butterfly_gap_tolerance=config.get('butterfly_gap_tolerance', 0.05),
            condor_max_width_asymmetry=config.get('condor_max_width_asymmetry', 0.5),
        )


def is_same_strike(call_strike: float, put_strike: float, tolerance: float) -> bool:
    """True when two strikes fall inside the relative same-strike band."""
    return abs(call_strike - put_strike) <= tolerance * call_strike


def group_by_series(legs: List[OptionLeg], kind: str | None = None) -> Dict[SeriesKey, List[OptionLeg]]:
    """Group usable legs by (underlying, expiration), sorted by strike.

    Args:
        legs: Option legs
        kind: Optional 'CALL' or 'PUT' filter

    Returns:
        Dictionary mapping series key to strike-sorted legs, in order of
        first appearance
    """
    by_series: Dict[SeriesKey, List[OptionLeg]] = defaultdict(list)
    for leg in legs:
        if not leg.is_usable:
            continue
        if kind is not None and leg.kind != kind:
            continue
        by_series[leg.series_key].append(leg)

    for series_legs in by_series.values():
        series_legs.sort(key=lambda leg: leg.strike)
    return dict(by_series)


def same_type_pairs(legs: List[OptionLeg], kind: str) -> Iterator[Tuple[OptionLeg, OptionLeg]]:
    """Yield (lower strike, higher strike) pairs of one option kind.

    Pairs with identical strikes are not emitted.
    """
    for series_legs in group_by_series(legs, kind).values():
        for i, low in enumerate(series_legs):
            for high in series_legs[i + 1:]:
                if high.strike > low.strike:
                    yield low, high


def cross_type_pairs(
    legs: List[OptionLeg],
    same_strike: bool,
    config: GeneratorConfig | None = None,
) -> Iterator[Tuple[OptionLeg, OptionLeg]]:
    """Yield (call, put) pairs from the same series.

    Args:
        legs: Option legs
        same_strike: True for straddle candidates (strikes inside the
            tolerance band); False for strangle candidates (put strike
            strictly below call strike and outside the band)
        config: Generator tolerances

    Yields:
        (call, put) tuples
    """
    config = config or GeneratorConfig()
    tolerance = config.same_strike_tolerance

    calls_by_series = group_by_series(legs, "CALL")
    puts_by_series = group_by_series(legs, "PUT")

    for key, calls in calls_by_series.items():
        puts = puts_by_series.get(key, [])
        for call in calls:
            for put in puts:
                matched = is_same_strike(call.strike, put.strike, tolerance)
                if same_strike and matched:
                    yield call, put
                elif not same_strike and not matched and put.strike < call.strike:
                    yield call, put


def equidistant_triples(
    legs: List[OptionLeg],
    config: GeneratorConfig | None = None,
    kind: str = "CALL",
) -> Iterator[Tuple[OptionLeg, OptionLeg, OptionLeg]]:
    """Yield (low, mid, high) strike triples with matching gaps.

    The lower gap must be positive and the two gaps may differ by at most
    the configured butterfly tolerance.
    """
    config = config or GeneratorConfig()
    tolerance = config.butterfly_gap_tolerance

    for series_legs in group_by_series(legs, kind).values():
        n = len(series_legs)
        for i in range(n):
            for j in range(i + 1, n):
                gap_low = series_legs[j].strike - series_legs[i].strike
                if gap_low <= 0:
                    continue
                for k in range(j + 1, n):
                    gap_high = series_legs[k].strike - series_legs[j].strike
                    if abs(gap_low - gap_high) <= tolerance:
                        yield series_legs[i], series_legs[j], series_legs[k]


def symmetric_quads(
    legs: List[OptionLeg],
    config: GeneratorConfig | None = None,
) -> Iterator[Tuple[OptionLeg, OptionLeg, OptionLeg, OptionLeg]]:
    """Yield (long put, short put, short call, long call) condor quads.

    A put spread and a call spread from the same series are combined when
    the short put strike is below the short call strike and the side
    widths differ by no more than the allowed asymmetry.
    """
    config = config or GeneratorConfig()

    put_spreads = defaultdict(list)
    for long_put, short_put in same_type_pairs(legs, "PUT"):
        put_spreads[long_put.series_key].append((long_put, short_put))

    call_spreads = defaultdict(list)
    for short_call, long_call in same_type_pairs(legs, "CALL"):
        call_spreads[short_call.series_key].append((short_call, long_call))

    for key, puts in put_spreads.items():
        for long_put, short_put in puts:
            put_width = short_put.strike - long_put.strike
            for short_call, long_call in call_spreads.get(key, []):
                if short_put.strike >= short_call.strike:
                    continue
                call_width = long_call.strike - short_call.strike
                max_width = max(put_width, call_width)
                if abs(put_width - call_width) <= config.condor_max_width_asymmetry * max_width:
                    yield long_put, short_put, short_call, long_call


def box_quads(
    legs: List[OptionLeg],
    config: GeneratorConfig | None = None,
) -> Iterator[Tuple[OptionLeg, OptionLeg, OptionLeg, OptionLeg]]:
    """Yield (low call, high call, low put, high put) box quads.

    Every call pair in a series is matched with the puts listed at the
    same two strikes. Strikes must match exactly; when a strike carries
    more than one put, the first listed one is used.
    """
    puts_by_strike = {}
    for key, puts in group_by_series(legs, "PUT").items():
        for put in puts:
            puts_by_strike.setdefault((key, put.strike), put)

    for low_call, high_call in same_type_pairs(legs, "CALL"):
        key = low_call.series_key
        low_put = puts_by_strike.get((key, low_call.strike))
        high_put = puts_by_strike.get((key, high_call.strike))
        if low_put is not None and high_put is not None:
            yield low_call, high_call, low_put, high_put
