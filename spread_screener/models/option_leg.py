"""Core option leg and Greeks data models."""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Literal

from ..utils.calendar import business_days_between
from ..utils.error_handling import DataValidationError, validate_leg_data

logger = logging.getLogger("spread_screener.models")

OptionKind = Literal["CALL", "PUT"]


@dataclass(frozen=True)
class Greeks:
    """Delta, gamma, theta and vega for a leg or a whole strategy.

    Theta is per trading day and vega per one volatility point.
    """

    delta: float = 0.0
    gamma: float = 0.0
    theta: float = 0.0
    vega: float = 0.0

    def scaled(self, factor: float) -> "Greeks":
        """Return every sensitivity multiplied by ``factor``."""
        return Greeks(
            delta=self.delta * factor,
            gamma=self.gamma * factor,
            theta=self.theta * factor,
            vega=self.vega * factor,
        )

    def __add__(self, other: "Greeks") -> "Greeks":
        return Greeks(
            delta=self.delta + other.delta,
            gamma=self.gamma + other.gamma,
            theta=self.theta + other.theta,
            vega=self.vega + other.vega,
        )

    def to_dict(self) -> dict:
        return {
            'delta': self.delta,
            'gamma': self.gamma,
            'theta': self.theta,
            'vega': self.vega,
        }


@dataclass(frozen=True)
class OptionLeg:
    """A single listed option contract as seen in a chain snapshot.

    Immutable so one leg can be shared by many candidate combinations.
    Premium is per unit of underlying, implied volatility as decimal
    (0.35 = 35%). Quoted Greeks are optional and may be absent or zero.
    """

    underlying: str
    symbol: str
    expiration: date
    business_days: int
    kind: OptionKind
    strike: float | None
    premium: float

    implied_vol: float | None = None
    delta: float | None = None
    gamma: float | None = None
    theta: float | None = None
    vega: float | None = None

    # Contract multiplier as listed (informational; financial scaling uses lot size)
    multiplier: int = 100

    # Set once scale normalization has been applied
    scale_normalized: bool = False

    def __post_init__(self):
        if self.kind not in ("CALL", "PUT"):
            raise ValueError(f"kind must be 'CALL' or 'PUT', got {self.kind!r}")
        if self.business_days < 0:
            raise ValueError(f"business_days must be non-negative, got {self.business_days}")

    @property
    def is_call(self) -> bool:
        return self.kind == "CALL"

    @property
    def is_put(self) -> bool:
        return self.kind == "PUT"

    @property
    def is_usable(self) -> bool:
        """True when the leg has a positive strike and a positive premium."""
        return self.strike is not None and self.strike > 0 and self.premium > 0

    @property
    def series_key(self) -> tuple:
        """Grouping key shared by legs that may be combined together."""
        return (self.underlying, self.expiration)

    @property
    def quoted_greeks(self) -> Greeks | None:
        """Quoted Greeks, or None when all are absent or zero."""
        values = (self.delta, self.gamma, self.theta, self.vega)
        if all(v is None or v == 0 for v in values):
            return None
        return Greeks(
            delta=self.delta or 0.0,
            gamma=self.gamma or 0.0,
            theta=self.theta or 0.0,
            vega=self.vega or 0.0,
        )

    def intrinsic_value(self, price: float) -> float:
        """Value of the contract at expiration for an underlying ``price``."""
        if self.strike is None:
            return 0.0
        if self.is_call:
            return max(price - self.strike, 0.0)
        return max(self.strike - price, 0.0)

    @classmethod
    def from_dict(cls, record: dict, as_of: date | None = None) -> "OptionLeg":
        """Build a leg from a raw chain record.

        Args:
            record: Mapping with underlying, symbol, expiration, kind, strike,
                premium and optionally business_days, implied_vol, delta,
                gamma, theta, vega and multiplier. Expiration may be a date
                or an ISO-8601 string.
            as_of: Reference date for computing business_days when the
                record does not carry it. Defaults to today.

        Returns:
            OptionLeg instance

        Raises:
            DataValidationError: If the record is incomplete or malformed
        """
        is_valid, error = validate_leg_data(record)
        if not is_valid:
            raise DataValidationError(f"Invalid leg {record.get('symbol', '?')}: {error}")

        expiration = record['expiration']
        if isinstance(expiration, datetime):
            expiration = expiration.date()
        elif not isinstance(expiration, date):
            try:
                expiration = date.fromisoformat(str(expiration)[:10])
            except ValueError as e:
                raise DataValidationError(
                    f"Invalid expiration for {record['symbol']}: {record['expiration']}"
                ) from e

        business_days = record.get('business_days')
        if business_days is None:
            business_days = business_days_between(as_of or date.today(), expiration)

        def _optional_float(key):
            value = record.get(key)
            return None if value is None else float(value)

        try:
            return cls(
                underlying=str(record['underlying']),
                symbol=str(record['symbol']),
                expiration=expiration,
                business_days=int(float(business_days)),
                kind=str(record['kind']).upper(),
                strike=_optional_float('strike'),
                premium=float(record['premium']),
                implied_vol=_optional_float('implied_vol'),
                delta=_optional_float('delta'),
                gamma=_optional_float('gamma'),
                theta=_optional_float('theta'),
                vega=_optional_float('vega'),
                multiplier=int(float(record.get('multiplier') or 100)),
            )
        except (TypeError, ValueError) as e:
            raise DataValidationError(f"Invalid leg {record['symbol']}: {e}") from e

    def __repr__(self) -> str:
        """Compact string representation for debugging."""
        strike_str = f"{self.strike:.2f}" if self.strike is not None else "?"
        return (f"OptionLeg({self.symbol} {self.kind[0]} K={strike_str} "
                f"P={self.premium:.2f} {self.expiration.isoformat()} bd={self.business_days})")


def legs_from_records(records, as_of: date | None = None) -> list:
    """Convert raw chain records into legs, skipping invalid ones.

    Args:
        records: Iterable of record dictionaries
        as_of: Reference date for business day computation

    Returns:
        List of OptionLeg in input order
    """
    legs = []
    for record in records:
        try:
            legs.append(OptionLeg.from_dict(record, as_of=as_of))
        except DataValidationError as e:
            logger.warning("Skipping record: %s", e)
    return legs
