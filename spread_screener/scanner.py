"""Scan entry points: legs in, ranked strategy records out.

Pipeline:
1. Normalize leg scale and drop unusable legs
2. Run each needed combination generator once
3. Dispatch every candidate tuple to its family evaluator
4. Rescale, filter, deduplicate and rank
"""

from pathlib import Path
from typing import Any, Dict, Iterable, List

import yaml

from .builders.combinations import GeneratorConfig
from .data.normalizer import NormalizerConfig, normalize_legs
from .data.validators import filter_usable_legs
from .models.option_leg import OptionLeg
from .models.strategy import StrategyKind, StrategyMetrics
from .scoring.ranker import RankingConfig, rank_strategies
from .strategies.common import EvaluatorConfig
from .strategies.registry import GENERATORS, STRATEGY_TABLE
from .utils.cache import GreeksCache
from .utils.error_handling import ConfigurationError, InsufficientDataError
from .utils.logging_config import get_logger

logger = get_logger("scanner")

DEFAULT_CONFIG_PATH = Path(__file__).parent / "config" / "default_params.yaml"


class ScanConfig:
    """Complete scan configuration composed of the per-stage configs."""

    def __init__(
        self,
        normalizer: NormalizerConfig | None = None,
        generator: GeneratorConfig | None = None,
        evaluator: EvaluatorConfig | None = None,
        ranking: RankingConfig | None = None,
    ):
        self.normalizer = normalizer or NormalizerConfig()
        self.generator = generator or GeneratorConfig()
        self.evaluator = evaluator or EvaluatorConfig()
        self.ranking = ranking or RankingConfig()

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "ScanConfig":
        """Create ScanConfig from a dictionary with one section per stage.

        Missing sections fall back to defaults.
        """
        return cls(
            normalizer=NormalizerConfig.from_dict(config.get('normalizer') or {}),
            generator=GeneratorConfig.from_dict(config.get('generator') or {}),
            evaluator=EvaluatorConfig.from_dict(config.get('evaluator') or {}),
            ranking=RankingConfig.from_dict(config.get('ranking') or {}),
        )


def load_scan_config(path: str | Path | None = None) -> ScanConfig:
    """Load a ScanConfig from a YAML file.

    Args:
        path: YAML file path; defaults to the bundled default_params.yaml

    Returns:
        ScanConfig instance

    Raises:
        ConfigurationError: If the file cannot be read or holds invalid values
    """
    path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    try:
        with open(path) as f:
            params = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Cannot load config {path}: {e}") from e

    if not isinstance(params, dict):
        raise ConfigurationError(f"Config {path} must be a mapping, got {type(params).__name__}")

    return ScanConfig.from_dict(params)


def _resolve_kinds(kinds: Iterable[StrategyKind | str] | None) -> List[StrategyKind]:
    if kinds is None:
        return list(STRATEGY_TABLE)
    return [k if isinstance(k, StrategyKind) else StrategyKind.from_name(k) for k in kinds]


def prepare_legs(legs: List[OptionLeg], config: NormalizerConfig | None = None) -> List[OptionLeg]:
    """Normalize leg scale and keep only usable legs.

    Raises:
        InsufficientDataError: If no leg survives
    """
    usable = filter_usable_legs(normalize_legs(legs, config or NormalizerConfig()))
    if not usable:
        raise InsufficientDataError(f"No usable legs among {len(legs)} inputs")
    return usable


def _generate(name: str, usable: List[OptionLeg], config: GeneratorConfig) -> list:
    try:
        return list(GENERATORS[name](usable, config))
    except Exception as e:
        logger.warning("Generator %s failed, skipping its families: %s", name, e)
        return []


def evaluate_candidates(
    legs: List[OptionLeg],
    spot_price: float,
    fee_per_leg: float = 0.0,
    config: ScanConfig | None = None,
    kinds: Iterable[StrategyKind | str] | None = None,
) -> List[StrategyMetrics]:
    """Generate and evaluate every candidate, without ranking.

    Args:
        legs: Option legs for one underlying (any mix of kinds and expirations)
        spot_price: Current underlying price
        fee_per_leg: Flat fee per leg recorded on each record
        config: Scan configuration
        kinds: Optional subset of strategy kinds to evaluate

    Returns:
        Unit StrategyMetrics records in discovery order (table order, then
        generator order)
    """
    config = config or ScanConfig()
    if spot_price <= 0:
        logger.warning("Invalid spot price %s, nothing to scan", spot_price)
        return []

    try:
        usable = prepare_legs(legs, config.normalizer)
    except InsufficientDataError as e:
        logger.info("%s, nothing to scan", e)
        return []

    cache = GreeksCache()
    candidates: Dict[str, list] = {}
    records: List[StrategyMetrics] = []

    for kind in _resolve_kinds(kinds):
        family = STRATEGY_TABLE[kind]
        if family.generator not in candidates:
            candidates[family.generator] = _generate(family.generator, usable, config.generator)
        tuples = candidates[family.generator]

        emitted = 0
        for legs_tuple in tuples:
            try:
                metrics = family.evaluator(legs_tuple, spot_price, fee_per_leg, config.evaluator, cache)
            except Exception as e:
                logger.warning("%s evaluation failed for %s: %s", kind.value, legs_tuple, e)
                continue
            if metrics is not None:
                records.append(metrics)
                emitted += 1

        logger.debug("%s: %d/%d candidates emitted", kind.value, emitted, len(tuples))

    logger.info("Evaluated %d legs into %d strategy records (%s)", len(usable), len(records), cache)
    return records


def scan_strategies(
    legs: List[OptionLeg],
    spot_price: float,
    fee_per_leg: float | None = None,
    lot_size: int | None = None,
    max_risk_reward: float | None = None,
    config: ScanConfig | None = None,
    kinds: Iterable[StrategyKind | str] | None = None,
) -> List[StrategyMetrics]:
    """Scan an option chain for ranked multi-leg strategies.

    Explicit fee_per_leg, lot_size and max_risk_reward override the values
    in config.ranking.

    Args:
        legs: Option legs for one underlying
        spot_price: Current underlying price (must be positive)
        fee_per_leg: Flat fee per leg (must be non-negative)
        lot_size: Units per position (must be positive)
        max_risk_reward: Upper bound on loss/profit (must be positive)
        config: Scan configuration
        kinds: Optional subset of strategy kinds to scan

    Returns:
        Ranked list of StrategyMetrics (empty when nothing qualifies or the
        parameters are invalid)

    Example:
        >>> results = scan_strategies(legs, spot_price=28.50, fee_per_leg=0.0, lot_size=100)
        >>> results[0].name, results[0].risk_reward
    """
    config = config or ScanConfig()
    ranking = config.ranking

    fee = ranking.fee_per_leg if fee_per_leg is None else fee_per_leg
    lot = ranking.lot_size if lot_size is None else lot_size
    max_rr = ranking.max_risk_reward if max_risk_reward is None else max_risk_reward

    if spot_price <= 0 or lot <= 0 or fee < 0 or (max_rr is not None and max_rr <= 0):
        logger.warning(
            "Invalid scan parameters: spot=%s lot=%s fee=%s max_risk_reward=%s",
            spot_price, lot, fee, max_rr
        )
        return []

    ranking = RankingConfig(
        lot_size=lot,
        fee_per_leg=fee,
        round_trip_fees=ranking.round_trip_fees,
        max_risk_reward=max_rr,
        naked_margin_rate=ranking.naked_margin_rate,
        sort_by=ranking.sort_by,
        top_n=ranking.top_n,
    )

    records = evaluate_candidates(legs, spot_price, fee, config, kinds)
    return rank_strategies(records, ranking)
