"""Strategy leg and evaluated strategy record models."""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Literal, Tuple, Union

from .option_leg import Greeks, OptionLeg

Direction = Literal["BUY", "SELL"]
CashFlowNature = Literal["CREDIT", "DEBIT"]

# Marker for a profit or loss with no finite bound
UNBOUNDED = "unbounded"

ProfitLoss = Union[float, Literal["unbounded"]]


def is_unbounded(value) -> bool:
    return isinstance(value, str) and value == UNBOUNDED


class StrategyKind(str, Enum):
    """Supported strategy families; the value is the display name."""

    BULL_CALL_SPREAD = "Bull Call Spread"
    BEAR_CALL_SPREAD = "Bear Call Spread"
    BULL_PUT_SPREAD = "Bull Put Spread"
    BEAR_PUT_SPREAD = "Bear Put Spread"
    LONG_STRADDLE = "Long Straddle"
    SHORT_STRADDLE = "Short Straddle"
    LONG_STRANGLE = "Long Strangle"
    SHORT_STRANGLE = "Short Strangle"
    BUTTERFLY_CALL = "Butterfly Call"
    IRON_CONDOR = "Iron Condor"
    RATIO_CALL_SPREAD = "Ratio Call Spread"
    RATIO_PUT_SPREAD = "Ratio Put Spread"
    SHORT_BUTTERFLY_CALL = "Short Butterfly Call"
    BOX_SPREAD = "Box Spread"

    @classmethod
    def from_name(cls, name: str) -> "StrategyKind":
        """Look up a kind by display name or enum member name."""
        for kind in cls:
            if name in (kind.value, kind.name):
                return kind
        raise ValueError(f"Unknown strategy kind: {name!r}")


@dataclass(frozen=True)
class StrategyLeg:
    """One option leg taken in a direction and quantity within a strategy."""

    leg: OptionLeg
    direction: Direction
    quantity: int = 1

    def __post_init__(self):
        if self.direction not in ("BUY", "SELL"):
            raise ValueError(f"direction must be 'BUY' or 'SELL', got {self.direction!r}")
        if self.quantity <= 0:
            raise ValueError(f"quantity must be positive, got {self.quantity}")

    @property
    def signed_quantity(self) -> int:
        """+quantity when bought, -quantity when sold."""
        return self.quantity if self.direction == "BUY" else -self.quantity

    @property
    def label(self) -> str:
        strike = f"{self.leg.strike:.2f}" if self.leg.strike is not None else "?"
        return f"{self.direction} {self.quantity}x {self.leg.kind} {self.leg.symbol} K={strike}"

    def payoff_at(self, price: float) -> float:
        """Expiration value of this position (excluding premium)."""
        return self.signed_quantity * self.leg.intrinsic_value(price)


@dataclass(frozen=True)
class StrategyMetrics:
    """Evaluated strategy record.

    Unit fields (net_premium, max_profit, max_loss, breakevens) are per one
    unit of underlying. net_premium is positive for a credit and negative
    for a debit; max_loss is reported as a negative number (0.0 for a box,
    whose expiry payoff never goes negative). The financial
    fields are filled in by the ranker after rescaling by lot size; there
    loss_financial is the positive amount of capital at risk.
    """

    name: str
    kind: StrategyKind
    underlying: str
    spot_price: float
    spread_type: str
    expiration: date
    business_days: int
    strike_description: str

    net_premium: float
    nature: CashFlowNature
    max_profit: ProfitLoss
    max_loss: ProfitLoss
    breakevens: Tuple[float, ...]
    greeks: Greeks
    legs: Tuple[StrategyLeg, ...]

    width: float | None = None
    fees_open: float = 0.0
    risk_reward: float | None = None

    # Set by ranker
    lot_size: int | None = None
    fees_total: float | None = None
    profit_financial: ProfitLoss | None = None
    loss_financial: float | None = None
    loss_is_estimate: bool = False
    return_on_risk: float | None = None
    position_greeks: Greeks | None = None

    @property
    def is_credit(self) -> bool:
        return self.nature == "CREDIT"

    @property
    def leg_count(self) -> int:
        return len(self.legs)

    @property
    def contract_count(self) -> int:
        """Contracts per unit position (butterfly body counts twice)."""
        return sum(sl.quantity for sl in self.legs)

    @property
    def max_risk(self) -> ProfitLoss:
        """Magnitude of max_loss, or UNBOUNDED."""
        if is_unbounded(self.max_loss):
            return UNBOUNDED
        return abs(self.max_loss)

    @property
    def expirations(self) -> set:
        return {sl.leg.expiration for sl in self.legs}

    @property
    def is_ranked(self) -> bool:
        return self.lot_size is not None

    def to_dict(self) -> dict:
        """JSON-safe dictionary representation.

        Unbounded values are rendered with the "unbounded" sentinel string.
        """
        return {
            'name': self.name,
            'kind': self.kind.name,
            'underlying': self.underlying,
            'spot_price': self.spot_price,
            'spread_type': self.spread_type,
            'expiration': self.expiration.isoformat(),
            'business_days': self.business_days,
            'strikes': self.strike_description,
            'net_premium': self.net_premium,
            'nature': self.nature,
            'max_profit': self.max_profit,
            'max_loss': self.max_loss,
            'breakevens': list(self.breakevens),
            'width': self.width,
            'greeks': self.greeks.to_dict(),
            'legs': [
                {
                    'symbol': sl.leg.symbol,
                    'kind': sl.leg.kind,
                    'strike': sl.leg.strike,
                    'premium': sl.leg.premium,
                    'direction': sl.direction,
                    'quantity': sl.quantity,
                }
                for sl in self.legs
            ],
            'fees_open': self.fees_open,
            'risk_reward': self.risk_reward,
            'lot_size': self.lot_size,
            'fees_total': self.fees_total,
            'profit_financial': self.profit_financial,
            'loss_financial': self.loss_financial,
            'loss_is_estimate': self.loss_is_estimate,
            'return_on_risk': self.return_on_risk,
            'position_greeks': self.position_greeks.to_dict() if self.position_greeks else None,
        }

    def __repr__(self) -> str:
        """Compact string representation."""
        rr = f"{self.risk_reward:.2f}" if self.risk_reward is not None else "N/A"
        return (f"StrategyMetrics({self.name} {self.underlying} {self.strike_description} "
                f"{self.nature} {abs(self.net_premium):.2f} RR={rr})")
