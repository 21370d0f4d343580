"""
Hybrid Retrieval Engine - Reranking Module
"""

from __future__ import annotations

from hybrid_retrieval.retrieval.reranking.base import Reranker, RerankResult, RerankedCandidate
from hybrid_retrieval.retrieval.reranking.overlap import OverlapReranker, jaccard_similarity

__all__ = [
    # Base
    "Reranker",
    "RerankResult",
    "RerankedCandidate",
    # Implementations
    "OverlapReranker",
    "jaccard_similarity",
]
