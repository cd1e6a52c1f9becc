"""Public stats API routes"""

import logging

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import PlainTextResponse

from stats_server.core.dependencies import get_stats_cache
from stats_server.core.errors import StatsError
from stats_server.services import StatsCache

logger = logging.getLogger(__name__)

router = APIRouter(tags=["stats"])


@router.api_route("/", methods=["GET", "HEAD"])
async def get_stats(
    request: Request,
    cache: StatsCache = Depends(get_stats_cache),
) -> Response:
    """Daily guild/subscriber counts and command usage, as compact JSON"""
    try:
        body = await cache.get_stats()
    except StatsError as e:
        request_id = getattr(request.state, "request_id", "-")
        logger.exception(f"[{request_id}] Failed to generate stats response: {e}")
        return PlainTextResponse("Internal Server Error", status_code=500)

    return Response(content=body, media_type="application/json")
