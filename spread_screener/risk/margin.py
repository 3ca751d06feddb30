"""Rough margin estimates for evaluated strategies.

These are approximate figures used to size the capital at risk of a
position, most importantly as the loss proxy for naked short volatility
positions whose true loss is unbounded. Always verify with your broker.
"""

import logging

from ..models.strategy import StrategyKind, StrategyMetrics, is_unbounded

logger = logging.getLogger("spread_screener.margin")

DEFAULT_NAKED_RATE = 0.15
MINIMUM_NAKED_RATE = 0.10


class MarginCalculator:
    """Calculate approximate margin requirements per strategy."""

    @staticmethod
    def credit_spread_margin(width: float, credit: float, lot_size: int = 100, quantity: int = 1) -> float:
        """Margin for a defined-risk credit structure.

        Args:
            width: Spread width (widest side for iron condors)
            credit: Net credit received per unit
            lot_size: Units per contract
            quantity: Number of positions

        Returns:
            (width - credit) * lot_size * quantity

        Example:
            >>> MarginCalculator.credit_spread_margin(width=2.0, credit=0.90)
            110.0
        """
        return (width - credit) * lot_size * quantity

    @staticmethod
    def debit_margin(debit: float, lot_size: int = 100, quantity: int = 1) -> float:
        """Margin for a debit structure: the premium paid."""
        return abs(debit) * lot_size * quantity

    @staticmethod
    def naked_short_margin(
        spot: float,
        credit: float,
        lot_size: int = 100,
        naked_rate: float = DEFAULT_NAKED_RATE,
        quantity: int = 1
    ) -> float:
        """Margin for a naked short straddle or strangle.

        Args:
            spot: Current underlying price
            credit: Premium collected per unit
            lot_size: Units per contract
            naked_rate: Fraction of spot required as collateral
            quantity: Number of positions

        Returns:
            max(naked_rate * spot - credit, 0.10 * spot) * lot_size * quantity

        Example:
            >>> MarginCalculator.naked_short_margin(spot=100.0, credit=4.0)
            1100.0
        """
        per_unit = max(naked_rate * spot - credit, MINIMUM_NAKED_RATE * spot)
        return per_unit * lot_size * quantity

    @staticmethod
    def estimate(
        metrics: StrategyMetrics,
        lot_size: int = 100,
        naked_rate: float = DEFAULT_NAKED_RATE
    ) -> float:
        """Estimate margin for any evaluated strategy record.

        Args:
            metrics: Evaluated strategy (unit figures)
            lot_size: Units per contract
            naked_rate: Collateral fraction for unbounded-loss positions

        Returns:
            Margin requirement in currency units
        """
        if is_unbounded(metrics.max_loss):
            margin = MarginCalculator.naked_short_margin(
                metrics.spot_price, metrics.net_premium, lot_size, naked_rate
            )
        elif metrics.kind is StrategyKind.RATIO_PUT_SPREAD:
            # Extra short put is covered by its full downside
            margin = abs(metrics.max_loss) * lot_size
        elif metrics.is_credit:
            margin = MarginCalculator.credit_spread_margin(
                metrics.width or 0.0, metrics.net_premium, lot_size
            )
        else:
            margin = MarginCalculator.debit_margin(metrics.net_premium, lot_size)

        logger.debug("Margin estimate for %s %s: %.2f",
                     metrics.name, metrics.strike_description, margin)
        return margin
