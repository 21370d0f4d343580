"""
Hybrid Retrieval Engine - Error Handler Middleware
"""

from __future__ import annotations

from fastapi import Request, Response
from fastapi.responses import JSONResponse

from hybrid_retrieval.core.exceptions import (
    ConfigurationError,
    DuplicateDocumentError,
    EmbeddingError,
    HybridRetrievalError,
)
from hybrid_retrieval.core.logging import get_logger

logger = get_logger(__name__)


def status_code_for(error: HybridRetrievalError) -> int:
    """HTTP status for an engine error."""
    if isinstance(error, DuplicateDocumentError):
        return 409
    if isinstance(error, EmbeddingError):
        return 502
    if isinstance(error, ConfigurationError):
        return 500
    return 400


async def error_handler_middleware(request: Request, call_next) -> Response:
    """Global error handler middleware."""
    try:
        return await call_next(request)
    except HybridRetrievalError as e:
        logger.error(
            "Retrieval engine exception",
            code=e.code,
            message=e.message,
            details=e.details,
        )
        return JSONResponse(
            status_code=status_code_for(e),
            content={
                "error": e.code,
                "message": e.message,
                "details": e.details,
            }
        )
    except Exception as e:
        logger.exception("Unhandled exception", error=str(e))
        return JSONResponse(
            status_code=500,
            content={
                "error": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
            }
        )
