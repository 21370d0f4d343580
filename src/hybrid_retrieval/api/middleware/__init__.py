from __future__ import annotations

from hybrid_retrieval.api.middleware.error_handler import error_handler_middleware, status_code_for
from hybrid_retrieval.api.middleware.logging import logging_middleware

__all__ = [
    "error_handler_middleware",
    "logging_middleware",
    "status_code_for",
]
