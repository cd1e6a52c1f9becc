"""Services layer - stats generation and caching

Services are initialized with their dependencies at app startup and reached
through dependency injection.
"""

from .stats_cache import CacheEntry, StatsCache
from .stats_generator import StatsGenerator

__all__ = [
    "CacheEntry",
    "StatsCache",
    "StatsGenerator",
]
