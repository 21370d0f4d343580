"""
Hybrid Retrieval Engine - API Dependencies
"""

from __future__ import annotations

from fastapi import Request

from hybrid_retrieval.retrieval.engine import RetrievalEngine


def get_engine(request: Request) -> RetrievalEngine:
    """The engine instance owned by the running application."""
    return request.app.state.engine
