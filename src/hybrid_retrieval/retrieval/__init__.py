"""
Hybrid Retrieval Engine - Retrieval Module

This module handles document retrieval:
- Lexical (inverted index) search
- Vector similarity search
- Hybrid fusion
- Query expansion
- Reranking
- Metadata filtering
"""

from __future__ import annotations

from hybrid_retrieval.retrieval.search import (
    LexicalIndex,
    LexicalCandidate,
    VectorSearcher,
    VectorCandidate,
    FusionScorer,
    FusedCandidate,
    tokenize,
)
from hybrid_retrieval.retrieval.query import QueryExpander
from hybrid_retrieval.retrieval.reranking import (
    Reranker,
    RerankResult,
    OverlapReranker,
)
from hybrid_retrieval.retrieval.filters import MetadataFilter
from hybrid_retrieval.retrieval.engine import (
    EngineConfig,
    RetrievalEngine,
    SearchResponse,
)

__all__ = [
    # Search
    "LexicalIndex",
    "LexicalCandidate",
    "VectorSearcher",
    "VectorCandidate",
    "FusionScorer",
    "FusedCandidate",
    "tokenize",
    # Query
    "QueryExpander",
    # Reranking
    "Reranker",
    "RerankResult",
    "OverlapReranker",
    # Filters
    "MetadataFilter",
    # Engine
    "EngineConfig",
    "RetrievalEngine",
    "SearchResponse",
]
