"""Builds the stats payload from the backing store"""

import asyncio
import logging
from collections import Counter

import asyncpg
from pydantic import ValidationError

from stats_server.core.errors import BackingStoreError, RefreshTimeoutError
from stats_server.models.stats import ActionTally, CountSample, StatsPayload, normalize_action
from stats_server.repositories.stats import StatsRepository

logger = logging.getLogger(__name__)


class StatsGenerator:
    """Run the aggregation queries and assemble one ``StatsPayload``"""

    def __init__(self, repo: StatsRepository):
        self.repo = repo

    async def generate(self, timeout: float) -> StatsPayload:
        """Produce a complete payload or raise; never a partial one.

        Raises:
            RefreshTimeoutError: the queries did not finish within ``timeout`` seconds
            BackingStoreError: a query failed or returned unreadable rows
        """
        try:
            count_rows, action_rows = await asyncio.wait_for(
                self.repo.fetch_stats_rows(), timeout=timeout
            )
        except TimeoutError:
            raise RefreshTimeoutError(timeout) from None
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
            raise BackingStoreError(f"stats query failed: {type(e).__name__}: {e}") from e

        try:
            return StatsPayload(
                counts=[
                    CountSample(
                        guild_count=row["guild_count"],
                        subscribed_count=row["subscribed_count"],
                        date=row["date"],
                    )
                    for row in count_rows
                ],
                action_counts=self._merge_actions(action_rows),
            )
        except (KeyError, TypeError, ValidationError) as e:
            raise BackingStoreError(f"malformed stats row: {type(e).__name__}: {e}") from e

    @staticmethod
    def _merge_actions(rows: list[dict]) -> list[ActionTally]:
        # Several raw actions can normalize to the same name (e.g. with and
        # without the _cmd suffix), so counts are summed per normalized name.
        totals: Counter[str] = Counter()
        for row in rows:
            totals[normalize_action(row["action"])] += row["count"]
        return [ActionTally(action=action, count=count) for action, count in totals.items()]
