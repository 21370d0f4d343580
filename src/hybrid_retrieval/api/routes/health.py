"""
Hybrid Retrieval Engine - Health Check Routes
"""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from hybrid_retrieval import __version__
from hybrid_retrieval.api.dependencies import get_engine
from hybrid_retrieval.retrieval.engine import RetrievalEngine


router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    timestamp: str
    version: str
    document_count: int


@router.get("/health", response_model=HealthResponse)
async def health_check(engine: RetrievalEngine = Depends(get_engine)):
    """Basic health check endpoint."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=__version__,
        document_count=engine.stats().document_count,
    )


@router.get("/live")
async def liveness_check():
    """Kubernetes liveness check."""
    return {"alive": True}
