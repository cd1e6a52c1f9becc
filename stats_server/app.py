"""FastAPI application factory"""

import asyncio
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware

from stats_server import __version__
from stats_server.core.config import Settings, get_settings
from stats_server.core.database import DatabaseManager
from stats_server.core.logging import setup_logging
from stats_server.core.middleware import request_context
from stats_server.repositories import StatsRepository
from stats_server.routers import stats_router
from stats_server.services import StatsCache, StatsGenerator

logger = logging.getLogger(__name__)


def _lifespan(settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Connect the database and build the stats cache; tear down on exit"""
        logger.info("Starting stats server")
        logger.info(f"Config loaded: {settings.censored_connection_string}")

        db_manager = DatabaseManager(settings.connection_string, ssl=settings.db_ssl)
        try:
            await asyncio.wait_for(db_manager.connect(), timeout=settings.db_connect_timeout)
        except TimeoutError:
            logger.critical(f"Database connection timed out after {settings.db_connect_timeout}s")
            raise
        logger.info("Created DB connection")

        if not await db_manager.check_health():
            await db_manager.disconnect()
            raise RuntimeError("Failed to ping database")
        logger.info("Confirmed DB connection")

        generator = StatsGenerator(StatsRepository(db_manager.pool))
        app.state.db_manager = db_manager
        app.state.stats_cache = StatsCache(
            generator,
            ttl=settings.cache_ttl,
            refresh_timeout=settings.refresh_timeout,
            coalesce=settings.coalesce_refreshes,
        )
        logger.info(
            f"Stats cache ready (ttl={settings.cache_ttl}s, "
            f"timeout={settings.refresh_timeout}s, coalesce={settings.coalesce_refreshes})"
        )

        yield

        logger.info("Shutting down stats server")
        app.state.stats_cache = None
        await db_manager.disconnect()

    return lifespan


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure FastAPI application"""
    settings = settings or get_settings()

    setup_logging(settings)

    app = FastAPI(
        title="Stats Server",
        description="Public guild, subscriber and command usage statistics",
        version=__version__,
        lifespan=_lifespan(settings),
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        openapi_url="/openapi.json" if settings.is_development else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "HEAD", "OPTIONS"],
        allow_headers=["*"],
    )
    app.middleware("http")(request_context)

    app.include_router(stats_router.router)

    # Liveness probe - always 200, never touches the cache or database
    @app.api_route("/health", methods=["GET", "HEAD"], include_in_schema=False)
    @app.api_route("/debug/health", methods=["GET", "HEAD"], include_in_schema=False)
    async def health() -> Response:
        return Response(status_code=200)

    logger.info("FastAPI application configured")

    return app
