"""Errors raised while producing the stats response.

Every failure the generator or the cache can raise derives from
``StatsError`` so the HTTP layer can map the whole family to one generic 500.
"""


class StatsError(Exception):
    """Base class for stats generation failures."""


class BackingStoreError(StatsError):
    """A backing-store query failed or returned rows we could not read."""


class RefreshTimeoutError(StatsError, TimeoutError):
    """Stats generation did not finish inside the refresh timeout."""

    def __init__(self, timeout: float):
        super().__init__(f"stats generation exceeded {timeout:.1f}s")
        self.timeout = timeout


class SerializationError(StatsError):
    """The stats payload could not be encoded to JSON."""
