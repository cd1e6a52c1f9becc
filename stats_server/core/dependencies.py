"""Dependency injection utilities for FastAPI"""

from fastapi import HTTPException, Request

from stats_server.services import StatsCache


def get_stats_cache(request: Request) -> StatsCache:
    """Get the StatsCache built by the app lifespan"""
    cache: StatsCache | None = getattr(request.app.state, "stats_cache", None)
    if cache is None:
        raise HTTPException(status_code=503, detail="Stats cache not ready")
    return cache
