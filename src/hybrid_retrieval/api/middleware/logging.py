"""
Hybrid Retrieval Engine - Request Logging Middleware

Tags each request with an id (the caller's ``X-Request-ID`` when sent),
binds it into the structlog context for the lifetime of the request, and
reports how long the request took in ``X-Response-Time``.
"""

import time
from uuid import uuid4

from fastapi import Request, Response

from hybrid_retrieval.core.logging import (
    bind_request_context,
    clear_request_context,
    get_logger,
)

REQUEST_ID_HEADER = "X-Request-ID"
RESPONSE_TIME_HEADER = "X-Response-Time"

logger = get_logger(__name__)


def request_id_for(request: Request) -> str:
    return request.headers.get(REQUEST_ID_HEADER) or uuid4().hex


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


async def logging_middleware(request: Request, call_next) -> Response:
    request_id = request_id_for(request)
    request.state.request_id = request_id

    clear_request_context()
    bind_request_context(
        request_id=request_id,
        method=request.method,
        path=request.url.path,
    )
    started = time.perf_counter()
    client = request.client.host if request.client else None
    logger.debug("request_received", client=client)

    try:
        response = await call_next(request)
    except Exception:
        logger.exception("request_failed", duration_ms=_elapsed_ms(started))
        raise
    else:
        duration_ms = _elapsed_ms(started)
        logger.info(
            "request_handled",
            status_code=response.status_code,
            duration_ms=duration_ms,
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers[RESPONSE_TIME_HEADER] = f"{duration_ms:.2f}ms"
        return response
    finally:
        clear_request_context()
