"""Repository for the counts and metrics tables."""

from __future__ import annotations

import logging

import asyncpg

from stats_server.models.stats import ACTION_PREFIX

logger = logging.getLogger(__name__)


class StatsRepository:
    """Read-only aggregation queries backing the public stats endpoint.

    Both queries run one after the other on a single pooled connection. They
    are not wrapped in a transaction; a small skew between the two results is
    acceptable for this endpoint.
    """

    def __init__(self, pool: asyncpg.Pool) -> None:
        self.pool = pool

    async def fetch_stats_rows(self) -> tuple[list[dict], list[dict]]:
        """Return ``(daily_counts, action_counts)`` rows."""
        async with self.pool.acquire() as conn:
            counts = await self._daily_counts(conn)
            actions = await self._action_counts(conn)
        return counts, actions

    async def _daily_counts(self, conn: asyncpg.Connection) -> list[dict]:
        """Highest guild / subscribed count per day, oldest day first."""
        rows = await conn.fetch(
            """
            SELECT
                guild_count,
                subscribed_count,
                to_char("time", 'YYYY-MM-DD') AS "date"
            FROM (
                SELECT
                    MAX(guild_count) AS guild_count,
                    MAX(subscribed_count) AS subscribed_count,
                    date_trunc('day', "time") AS "time"
                FROM counts
                GROUP BY date_trunc('day', "time")
            ) AS daily
            ORDER BY "time"
            """
        )
        return [dict(row) for row in rows]

    async def _action_counts(self, conn: asyncpg.Connection) -> list[dict]:
        """Usage count per raw command action."""
        rows = await conn.fetch(
            """
            SELECT action, COUNT(*) AS "count"
            FROM metrics
            WHERE starts_with(action, $1)
            GROUP BY action
            """,
            ACTION_PREFIX,
        )
        return [dict(row) for row in rows]
