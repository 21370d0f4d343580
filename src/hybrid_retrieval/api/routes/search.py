"""
Hybrid Retrieval Engine - Search API Routes
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from hybrid_retrieval.api.dependencies import get_engine
from hybrid_retrieval.core.types import (
    FusionMethod,
    FusionWeights,
    IndexStats,
    SearchOptions,
    SearchResult,
)
from hybrid_retrieval.retrieval.engine import RetrievalEngine


router = APIRouter()


# =============================================================================
# Request/Response Schemas
# =============================================================================

class SearchRequest(BaseModel):
    """Request schema for search endpoint. Omitted options use engine defaults."""
    query: str = Field(..., min_length=1, max_length=10000, description="Natural-language query")
    top_k: Optional[int] = Field(None, ge=1, le=100, description="Number of results to return")
    weights: Optional[FusionWeights] = Field(None, description="Lexical/vector fusion weights")
    min_relevance: Optional[float] = Field(None, description="Drop results scoring below this")
    use_reranking: Optional[bool] = Field(None, description="Apply the term-overlap reranker")
    fusion_method: Optional[FusionMethod] = Field(None, description="weighted or rrf")
    filters: Optional[dict[str, Any]] = Field(None, description="Metadata filters")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "query": "database caching",
                    "top_k": 5,
                    "weights": {"lexical": 0.3, "vector": 0.7},
                }
            ]
        }
    }

    def to_options(self, defaults: SearchOptions) -> SearchOptions:
        """Overlay the fields the client sent on the engine defaults."""
        return SearchOptions(
            top_k=self.top_k if self.top_k is not None else defaults.top_k,
            weights=self.weights or defaults.weights,
            min_relevance=(
                self.min_relevance if self.min_relevance is not None else defaults.min_relevance
            ),
            use_reranking=(
                self.use_reranking if self.use_reranking is not None else defaults.use_reranking
            ),
            fusion_method=self.fusion_method or defaults.fusion_method,
            filters=self.filters if self.filters is not None else defaults.filters,
        )


class SearchResponseModel(BaseModel):
    """Response schema for search endpoint."""
    query: str
    expanded_query: str
    results: list[SearchResult] = Field(default_factory=list)
    total: int
    latency_ms: float


# =============================================================================
# Endpoints
# =============================================================================

@router.post("/search", response_model=SearchResponseModel)
async def search(
    request: SearchRequest,
    engine: RetrievalEngine = Depends(get_engine),
):
    """
    Run a hybrid search.

    The query is expanded with synonyms, matched lexically and by embedding
    similarity, fused, reranked, then filtered and truncated.
    """
    options = request.to_options(engine.config.default_options())
    response = await engine.search_with_details(request.query, options)

    return SearchResponseModel(
        query=response.query,
        expanded_query=response.expanded_query,
        results=response.results,
        total=response.total,
        latency_ms=round(response.latency_ms, 2),
    )


@router.get("/stats", response_model=IndexStats)
async def stats(engine: RetrievalEngine = Depends(get_engine)):
    """Index sizes."""
    return engine.stats()
