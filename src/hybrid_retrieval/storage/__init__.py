"""
Hybrid Retrieval Engine - Storage Module

In-memory storage for documents and embeddings, plus the lock that keeps
them consistent with the lexical index.
"""

from __future__ import annotations

from hybrid_retrieval.storage.document import InMemoryDocumentStore
from hybrid_retrieval.storage.locking import ReadWriteLock
from hybrid_retrieval.storage.vector import InMemoryVectorStore, cosine_similarity

__all__ = [
    "InMemoryDocumentStore",
    "InMemoryVectorStore",
    "ReadWriteLock",
    "cosine_similarity",
]
