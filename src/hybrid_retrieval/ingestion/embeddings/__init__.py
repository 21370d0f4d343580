"""
Hybrid Retrieval Engine - Embeddings Module
"""

from __future__ import annotations

from hybrid_retrieval.ingestion.embeddings.base import EmbeddingProvider, EmbeddingResult
from hybrid_retrieval.ingestion.embeddings.hashing import HashingEmbeddings
from hybrid_retrieval.ingestion.embeddings.factory import get_embedding_provider

__all__ = [
    # Base
    "EmbeddingProvider",
    "EmbeddingResult",
    # Providers
    "HashingEmbeddings",
    # Factory
    "get_embedding_provider",
]
