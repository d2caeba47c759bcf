"""Disk-backed caches that absorb upstream instability."""

from pycarha.cache.state import StateMergeCache
from pycarha.cache.units import CacheStats, UnitCache

__all__ = ["CacheStats", "StateMergeCache", "UnitCache"]
