"""Repository layer over the stats backing store."""

from .stats import StatsRepository

__all__ = [
    "StatsRepository",
]
