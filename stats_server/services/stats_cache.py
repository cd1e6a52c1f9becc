"""Last-known-good cache in front of the stats generator.

A single ``CacheEntry`` holds the serialized response and the moment it was
produced. Readers take one reference to the current entry and never block
each other; a refresh publishes a brand new entry with one assignment, so a
reader sees either the old entry or the new one, never a mix.

When the entry is older than the TTL the next request regenerates it.
Concurrent misses share one in-flight refresh unless ``coalesce`` is off, in
which case every stale reader runs its own generation and the last one to
finish wins the entry.

A failed refresh leaves the entry untouched and is raised to the caller; it
never marks the cache fresh, so the following request tries again.
"""

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from stats_server.core.errors import SerializationError
from stats_server.services.stats_generator import StatsGenerator

logger = logging.getLogger(__name__)

PLACEHOLDER_BODY = b"{}"


@dataclass(frozen=True)
class CacheEntry:
    body: bytes
    produced_at: float


class StatsCache:
    """Serve cached stats bytes, regenerating at most once per TTL window."""

    def __init__(
        self,
        generator: StatsGenerator,
        ttl: float,
        refresh_timeout: float,
        *,
        coalesce: bool = True,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl <= 0:
            raise ValueError(f"ttl must be positive, got {ttl}")
        if refresh_timeout <= 0:
            raise ValueError(f"refresh_timeout must be positive, got {refresh_timeout}")

        self.generator = generator
        self.ttl = ttl
        self.refresh_timeout = refresh_timeout
        self.coalesce = coalesce
        self._clock = clock
        # Starts expired so the first request always generates
        self._entry = CacheEntry(body=PLACEHOLDER_BODY, produced_at=float("-inf"))
        self._inflight: asyncio.Task[bytes] | None = None
        self._inflight_callers = 0

    @property
    def entry(self) -> CacheEntry:
        return self._entry

    def is_fresh(self, entry: CacheEntry | None = None) -> bool:
        entry = entry or self._entry
        return self._clock() - entry.produced_at < self.ttl

    async def get_stats(self) -> bytes:
        """Return the current stats JSON, regenerating it if it has expired.

        The returned ``bytes`` object is immutable, so callers may hold on to
        it (e.g. while writing to a slow client) without seeing later refreshes.

        Raises:
            StatsError: generation failed, timed out, or could not be serialized
        """
        entry = self._entry
        if self.is_fresh(entry):
            return entry.body

        # Shielded: a caller going away must not cancel a refresh other
        # callers may be waiting on. The refresh still ends at refresh_timeout.
        return await asyncio.shield(self._refresh_task())

    def _refresh_task(self) -> "asyncio.Task[bytes]":
        if not self.coalesce:
            return self._start_refresh()

        if self._inflight is None or self._inflight.done():
            self._inflight_callers = 1
            self._inflight = self._start_refresh()
        else:
            self._inflight_callers += 1
            logger.debug("Joining in-flight stats refresh")
        return self._inflight

    def _start_refresh(self) -> "asyncio.Task[bytes]":
        task = asyncio.create_task(self._refresh())
        task.add_done_callback(self._refresh_done)
        return task

    def _refresh_done(self, task: "asyncio.Task[bytes]") -> None:
        if self._inflight is task:
            self._inflight = None
        # Callers receive the error through the shield; retrieving it here
        # keeps asyncio from reporting it again when every caller has left.
        if not task.cancelled():
            task.exception()

    async def _refresh(self) -> bytes:
        started = time.perf_counter()
        payload = await self.generator.generate(self.refresh_timeout)

        try:
            body = payload.to_json()
        except (TypeError, ValueError) as e:
            raise SerializationError(f"could not encode stats payload: {e}") from e

        self._entry = CacheEntry(body=body, produced_at=self._clock())
        callers = self._inflight_callers if self.coalesce else 1
        logger.info(
            f"Stats refreshed in {(time.perf_counter() - started) * 1000:.0f}ms "
            f"for {callers} caller(s) ({len(payload.counts)} days, {len(payload.action_counts)} actions, {len(body)} bytes)"
        )
        return body
