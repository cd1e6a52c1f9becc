"""PostgreSQL connection pool management."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

import asyncpg

logger = logging.getLogger(__name__)


@dataclass
class PoolConfig:
    """Database pool configuration with sensible defaults."""

    min_size: int = 1
    max_size: int = 5
    timeout: float = 5.0
    command_timeout: float = 15.0
    max_inactive_connection_lifetime: float = 300.0
    max_retries: int = 3
    retry_delay: float = 2.0


class DatabaseManager:
    """Manages the PostgreSQL connection pool lifecycle.

    The stats queries are read-only, so the pool is kept small; the cache in
    front of it bounds how often a connection is actually borrowed.
    """

    def __init__(
        self,
        database_url: str,
        config: PoolConfig | None = None,
        ssl: str | None = "prefer",
    ) -> None:
        self.database_url = database_url
        self.config = config or PoolConfig()
        self.ssl = ssl
        self._pool: asyncpg.Pool | None = None

    async def connect(self) -> None:
        """Initialize database connection pool with retry."""
        if self._pool is not None:
            logger.warning("Database pool already initialized")
            return

        cfg = self.config
        for attempt in range(1, cfg.max_retries + 1):
            try:
                self._pool = await asyncpg.create_pool(
                    dsn=self.database_url,
                    min_size=cfg.min_size,
                    max_size=cfg.max_size,
                    timeout=cfg.timeout,
                    command_timeout=cfg.command_timeout,
                    ssl=self.ssl,
                    max_inactive_connection_lifetime=cfg.max_inactive_connection_lifetime,
                )

                # Verify pool is usable
                async with self._pool.acquire() as conn:
                    await conn.fetchval("SELECT 1")

                logger.info(f"Database pool created and verified (size={cfg.min_size}-{cfg.max_size})")
                return
            except Exception as e:
                if self._pool is not None:
                    await self._pool.close()
                    self._pool = None
                if attempt < cfg.max_retries:
                    delay = cfg.retry_delay * (2 ** (attempt - 1))
                    logger.warning(
                        f"Database connection attempt {attempt}/{cfg.max_retries} failed: "
                        f"{type(e).__name__}: {e or repr(e)}, retrying in {delay}s..."
                    )
                    await asyncio.sleep(delay)
                else:
                    logger.exception(
                        f"Database connection failed after {cfg.max_retries} attempts: "
                        f"{type(e).__name__}: {e or repr(e)}"
                    )
                    raise

    async def disconnect(self) -> None:
        """Close database connection pool."""
        if self._pool is None:
            return

        try:
            await self._pool.close()
            logger.info("Database pool closed")
        except Exception as e:
            logger.exception(f"Error closing database pool: {e}")
        finally:
            self._pool = None

    async def check_health(self) -> bool:
        """Test if pool can actually execute a query."""
        if self._pool is None:
            return False
        try:
            async with self._pool.acquire(timeout=2.0) as conn:
                await conn.fetchval("SELECT 1")
            return True
        except Exception as e:
            logger.warning(f"Database health check failed: {type(e).__name__}: {e}")
            return False

    @property
    def pool(self) -> asyncpg.Pool:
        """Get the database connection pool. Raises if not initialized."""
        if self._pool is None:
            raise RuntimeError("Database pool not initialized. Call connect() first.")
        return self._pool
