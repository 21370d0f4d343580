"""
Hybrid Retrieval Engine - In-Memory Vector Store

Flat id -> embedding store. Search is a linear cosine scan, which is fine
for the hundreds to low thousands of documents this engine targets.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence

from hybrid_retrieval.core.logging import LoggerMixin


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Cosine similarity of two vectors.

    Vectors of different length are compared over the shorter length.
    Returns 0.0 when either vector has zero magnitude.
    """
    length = min(len(a), len(b))
    dot = 0.0
    magnitude_a = 0.0
    magnitude_b = 0.0

    for i in range(length):
        dot += a[i] * b[i]
        magnitude_a += a[i] * a[i]
        magnitude_b += b[i] * b[i]

    if magnitude_a == 0.0 or magnitude_b == 0.0:
        return 0.0

    similarity = dot / (math.sqrt(magnitude_a) * math.sqrt(magnitude_b))
    # Rounding can push a self-similarity a hair past 1.0
    return max(-1.0, min(1.0, similarity))


class InMemoryVectorStore(LoggerMixin):
    """
    Stores one embedding per document id, all of the same dimension.

    Callers serialize access; see ReadWriteLock.
    """

    def __init__(self, dimension: int):
        self.dimension = dimension
        self._vectors: dict[str, list[float]] = {}

    def _coerce(self, doc_id: str, embedding: Sequence[float]) -> list[float]:
        """Pad with zeros or truncate so every stored vector has `dimension` entries."""
        vector = [float(v) for v in embedding]
        if len(vector) == self.dimension:
            return vector

        self.logger.warning(
            "Embedding dimension mismatch, coercing",
            doc_id=doc_id,
            expected=self.dimension,
            actual=len(vector),
        )
        if len(vector) > self.dimension:
            return vector[:self.dimension]
        return vector + [0.0] * (self.dimension - len(vector))

    def upsert(self, doc_id: str, embedding: Sequence[float]) -> None:
        """Insert or replace the embedding for a document."""
        self._vectors[doc_id] = self._coerce(doc_id, embedding)

    def get(self, doc_id: str) -> Optional[list[float]]:
        return self._vectors.get(doc_id)

    def delete(self, doc_id: str) -> bool:
        return self._vectors.pop(doc_id, None) is not None

    def search(self, query_vector: Sequence[float]) -> list[tuple[str, float]]:
        """Score every stored vector against the query, in insertion order."""
        return [
            (doc_id, cosine_similarity(query_vector, vector))
            for doc_id, vector in self._vectors.items()
        ]

    def clear(self) -> None:
        self._vectors.clear()

    def __contains__(self, doc_id: object) -> bool:
        return doc_id in self._vectors

    def __len__(self) -> int:
        return len(self._vectors)
