"""Per-request HTTP middleware"""

import logging
import time
import uuid

from fastapi import Request, Response
from fastapi.responses import PlainTextResponse

logger = logging.getLogger("stats_server.access")

REQUEST_ID_HEADER = "X-Request-ID"


async def request_context(request: Request, call_next) -> Response:
    """Tag the request with an ID, recover from crashes and log one access line"""
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
    request.state.request_id = request_id
    started = time.perf_counter()

    try:
        response = await call_next(request)
    except Exception:
        logger.exception(f"[{request_id}] Unhandled error on {request.method} {request.url.path}")
        response = PlainTextResponse("Internal Server Error", status_code=500)

    elapsed_ms = (time.perf_counter() - started) * 1000
    response.headers[REQUEST_ID_HEADER] = request_id
    client = request.client.host if request.client else "-"
    logger.info(
        f"[{request_id}] {client} {request.method} {request.url.path} "
        f"{response.status_code} {elapsed_ms:.1f}ms"
    )
    return response
