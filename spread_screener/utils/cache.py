"""Caching utilities for per-leg Greek calculations.

A single option leg usually participates in many candidate combinations
within one scan, so its model Greeks are computed once and reused.
"""

from typing import Dict, Hashable, Callable, TypeVar
from collections import OrderedDict
import logging

logger = logging.getLogger("spread_screener.cache")

T = TypeVar('T')


class GreeksCache:
    """LRU cache keyed by (leg, spot, rate, volatility) tuples.

    Lives for the duration of a single scan; never shared between scans.
    """

    def __init__(self, maxsize: int = 4096):
        """Initialize Greeks cache.

        Args:
            maxsize: Maximum number of cached entries
        """
        self._cache: OrderedDict = OrderedDict()
        self.maxsize = maxsize
        self._hits = 0
        self._misses = 0

    def get_or_compute(self, key: Hashable, compute_func: Callable[[], T]) -> T:
        """Get a cached value or compute and store it.

        Args:
            key: Hashable cache key (OptionLeg is frozen and hashable)
            compute_func: Zero-argument function producing the value on a miss

        Returns:
            Cached or freshly computed value

        Example:
            >>> cache = GreeksCache()
            >>> greeks = cache.get_or_compute(
            ...     (leg, 105.0, 0.1075, 0.35),
            ...     lambda: model_greeks(leg, 105.0, 0.1075, 0.35),
            ... )
        """
        if key in self._cache:
            self._hits += 1
            self._cache.move_to_end(key)
            return self._cache[key]

        self._misses += 1
        value = compute_func()

        if len(self._cache) >= self.maxsize:
            # Evict least recently used
            self._cache.popitem(last=False)
            logger.debug("Greeks cache full, evicted entry")

        self._cache[key] = value
        return value

    def clear(self):
        """Clear all cached entries."""
        self._cache.clear()
        self._hits = 0
        self._misses = 0

    def stats(self) -> Dict[str, int | float]:
        """Get cache statistics.

        Returns:
            Dictionary with size, maxsize, hits, misses and hit_rate (percent)
        """
        total_requests = self._hits + self._misses
        hit_rate = (self._hits / total_requests * 100) if total_requests > 0 else 0.0

        return {
            'size': len(self._cache),
            'maxsize': self.maxsize,
            'hits': self._hits,
            'misses': self._misses,
            'hit_rate': hit_rate,
        }

    def __len__(self) -> int:
        return len(self._cache)

    def __repr__(self) -> str:
        stats = self.stats()
        return (
            f"GreeksCache(size={stats['size']}/{stats['maxsize']}, "
            f"hits={stats['hits']}, misses={stats['misses']}, "
            f"hit_rate={stats['hit_rate']:.1f}%)"
        )
