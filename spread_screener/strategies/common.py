"""Shared evaluator configuration and record construction."""

from typing import Dict, Sequence, Tuple

from ..analytics.greeks import DEFAULT_FALLBACK_VOL, aggregate_greeks
from ..analytics.pricing import RISK_FREE_RATE
from ..models.option_leg import OptionLeg
from ..models.strategy import (
    StrategyKind,
    StrategyLeg,
    StrategyMetrics,
    ProfitLoss,
    is_unbounded,
)
from ..utils.cache import GreeksCache
from ..utils.error_handling import ConfigurationError, safe_divide


class EvaluatorConfig:
    """Configuration for strategy evaluator sanity filters."""

    def __init__(
        self,
        min_net_premium: float = 0.01,
        max_credit_ratio: float = 0.90,
        risk_free_rate: float = RISK_FREE_RATE,
        fallback_vol: float = DEFAULT_FALLBACK_VOL,
        strangle_requires_otm: bool = False,
    ):
        """Initialize evaluator configuration.

        Args:
            min_net_premium: Credits and debits at or below this are rejected
                as numerically degenerate
            max_credit_ratio: Credit structures collecting more than this
                fraction of the spread width are rejected (0.90 = 90%)
            risk_free_rate: Rate used by the pricing model for missing Greeks
            fallback_vol: Volatility used when a leg has no implied vol
            strangle_requires_otm: Only accept long strangles whose put
                strike is at or below spot and call strike at or above it
        """
        if min_net_premium < 0:
            raise ConfigurationError(f"min_net_premium must be non-negative, got {min_net_premium}")
        if not 0 < max_credit_ratio <= 1:
            raise ConfigurationError(f"max_credit_ratio must be in (0, 1], got {max_credit_ratio}")
        if fallback_vol <= 0:
            raise ConfigurationError(f"fallback_vol must be positive, got {fallback_vol}")
        self.min_net_premium = min_net_premium
        self.max_credit_ratio = max_credit_ratio
        self.risk_free_rate = risk_free_rate
        self.fallback_vol = fallback_vol
        self.strangle_requires_otm = strangle_requires_otm

    @classmethod
    def from_dict(cls, config: Dict) -> "EvaluatorConfig":
        """Create EvaluatorConfig from dictionary (e.g., from YAML)."""
        return cls(
            min_net_premium=config.get('min_net_premium', 0.01),
            max_credit_ratio=config.get('max_credit_ratio', 0.90),
            risk_free_rate=config.get('risk_free_rate', RISK_FREE_RATE),
            fallback_vol=config.get('fallback_vol', DEFAULT_FALLBACK_VOL),
            strangle_requires_otm=config.get('strangle_requires_otm', False),
        )


def same_series(legs: Sequence[OptionLeg]) -> bool:
    """True when all legs share underlying and expiration."""
    return len({leg.series_key for leg in legs}) == 1


def credit_within_width(credit: float, width: float, config: EvaluatorConfig) -> bool:
    """Reject credits that are implausibly close to the width (stale book)."""
    return credit <= config.max_credit_ratio * width


def strike_description(strategy_legs: Sequence[StrategyLeg]) -> str:
    """Slash-joined strikes in ascending order, e.g. '28.00/30.00'."""
    strikes = sorted({sl.leg.strike for sl in strategy_legs})
    return "/".join(f"{strike:.2f}" for strike in strikes)


def unit_risk_reward(max_profit: ProfitLoss, max_loss: ProfitLoss) -> float | None:
    """|max_loss| / max_profit, or None when either side is unbounded."""
    if is_unbounded(max_profit) or is_unbounded(max_loss):
        return None
    return safe_divide(abs(max_loss), max_profit, default=None)


def build_record(
    kind: StrategyKind,
    spread_type: str,
    strategy_legs: Tuple[StrategyLeg, ...],
    spot: float,
    fee_per_leg: float,
    net_premium: float,
    max_profit: ProfitLoss,
    max_loss: ProfitLoss,
    breakevens: Tuple[float, ...],
    width: float | None,
    config: EvaluatorConfig,
    cache: GreeksCache | None = None,
) -> StrategyMetrics:
    """Assemble a StrategyMetrics from evaluated unit figures.

    Aggregates Greeks, derives strike description, per-open fees and the
    unit risk/reward ratio.
    """
    first = strategy_legs[0].leg
    greeks = aggregate_greeks(
        strategy_legs,
        spot,
        rate=config.risk_free_rate,
        fallback_vol=config.fallback_vol,
        cache=cache,
    )
    return StrategyMetrics(
        name=kind.value,
        kind=kind,
        underlying=first.underlying,
        spot_price=spot,
        spread_type=spread_type,
        expiration=first.expiration,
        business_days=first.business_days,
        strike_description=strike_description(strategy_legs),
        net_premium=net_premium,
        nature="CREDIT" if net_premium > 0 else "DEBIT",
        max_profit=max_profit,
        max_loss=max_loss,
        breakevens=breakevens,
        greeks=greeks,
        legs=strategy_legs,
        width=width,
        fees_open=len(strategy_legs) * fee_per_leg,
        risk_reward=unit_risk_reward(max_profit, max_loss),
    )
