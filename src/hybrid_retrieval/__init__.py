"""
Hybrid Retrieval Engine

Indexes short text documents and answers natural-language queries by
combining lexical term matching with embedding similarity, followed by a
term-overlap reranking pass.
"""

from __future__ import annotations

__version__ = "0.1.0"

from hybrid_retrieval.core.types import (
    Document,
    FusionMethod,
    FusionWeights,
    IndexStats,
    SearchOptions,
    SearchResult,
)
from hybrid_retrieval.retrieval.engine import EngineConfig, RetrievalEngine, SearchResponse

__all__ = [
    "Document",
    "EngineConfig",
    "FusionMethod",
    "FusionWeights",
    "IndexStats",
    "RetrievalEngine",
    "SearchOptions",
    "SearchResponse",
    "SearchResult",
]
