"""
Hybrid Retrieval Engine - Ingestion Module

This module handles turning raw text into indexable form:
- Embedding providers
- Sample seed documents
"""

from __future__ import annotations

from hybrid_retrieval.ingestion.embeddings import (
    EmbeddingProvider,
    EmbeddingResult,
    HashingEmbeddings,
    get_embedding_provider,
)
from hybrid_retrieval.ingestion.samples import SAMPLE_DOCUMENTS, seed_sample_documents

__all__ = [
    # Embeddings
    "EmbeddingProvider",
    "EmbeddingResult",
    "HashingEmbeddings",
    "get_embedding_provider",
    # Samples
    "SAMPLE_DOCUMENTS",
    "seed_sample_documents",
]
