"""Expiration payoff of evaluated strategies."""

from typing import List, Tuple

import numpy as np

from ..models.strategy import StrategyMetrics


def payoff_at_expiration(metrics: StrategyMetrics, price: float) -> float:
    """Profit or loss per unit at expiration for an underlying ``price``.

    Sum of each leg's signed intrinsic value plus the net premium
    (positive for credits, negative for debits).

    Example:
        >>> payoff_at_expiration(bull_call, 28.90)  # at breakeven
        0.0
    """
    return sum(sl.payoff_at(price) for sl in metrics.legs) + metrics.net_premium


def payoff_curve(
    metrics: StrategyMetrics,
    spot: float,
    range_pct: float = 0.20,
    steps: int = 100,
    lot_size: int = 1,
) -> List[Tuple[float, float]]:
    """Sample the expiration payoff around ``spot``.

    Args:
        metrics: Evaluated strategy
        spot: Center of the price range
        range_pct: Half-width of the range as a fraction of spot
        steps: Number of intervals (steps + 1 points are returned)
        lot_size: Multiplier applied to every payoff value

    Returns:
        List of (price, payoff) tuples in ascending price order
    """
    if steps <= 0:
        raise ValueError(f"steps must be positive, got {steps}")

    prices = np.linspace(spot * (1 - range_pct), spot * (1 + range_pct), steps + 1)
    return [
        (float(price), payoff_at_expiration(metrics, float(price)) * lot_size)
        for price in prices
    ]
