"""
Hybrid Retrieval Engine - Shared Type Definitions
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Enums
# =============================================================================

class FusionMethod(str, Enum):
    """How lexical and vector candidates are merged."""
    WEIGHTED = "weighted"
    RRF = "rrf"


# =============================================================================
# Document Types
# =============================================================================

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Document(BaseModel):
    """A stored document. Immutable once ingested."""
    model_config = ConfigDict(frozen=True)

    id: str
    text: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    inserted_at: datetime = Field(default_factory=_utcnow)


# =============================================================================
# Search Types
# =============================================================================

class FusionWeights(BaseModel):
    """Weights applied to each retrieval stage during fusion."""
    lexical: float = Field(default=0.3, ge=0.0)
    vector: float = Field(default=0.7, ge=0.0)


class SearchOptions(BaseModel):
    """Per-query search options."""
    top_k: int = Field(default=10, ge=1)
    weights: FusionWeights = Field(default_factory=FusionWeights)
    min_relevance: float = 0.0
    use_reranking: bool = True
    fusion_method: FusionMethod = FusionMethod.WEIGHTED
    filters: Optional[dict[str, Any]] = None


class ScoreBreakdown(BaseModel):
    """Scores recorded at each pipeline stage for one result."""
    lexical: float = 0.0
    vector: float = 0.0
    fused: float = 0.0
    overlap: Optional[float] = None
    reranked: Optional[float] = None


class SearchResult(BaseModel):
    """A single ranked search result."""
    id: str
    text: str
    relevance_score: float
    raw_scores: ScoreBreakdown = Field(default_factory=ScoreBreakdown)
    metadata: dict[str, Any] = Field(default_factory=dict)
    explanation: str = ""


class IndexStats(BaseModel):
    """Snapshot of the engine's index sizes."""
    document_count: int
    indexed_term_count: int
    embedding_dimension: int
    storage_size_bytes: int
