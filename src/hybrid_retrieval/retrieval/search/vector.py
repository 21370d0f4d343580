"""
Hybrid Retrieval Engine - Vector Search Implementation
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from hybrid_retrieval.core.logging import LoggerMixin
from hybrid_retrieval.storage.vector import InMemoryVectorStore

DEFAULT_SIMILARITY_FLOOR = 0.3


@dataclass
class VectorCandidate:
    """Document whose embedding cleared the similarity floor."""
    id: str
    score: float


class VectorSearcher(LoggerMixin):
    """Cosine similarity search over an in-memory vector store."""

    def __init__(
        self,
        vector_store: InMemoryVectorStore,
        similarity_floor: float = DEFAULT_SIMILARITY_FLOOR,
    ):
        """
        Initialize vector searcher.

        Args:
            vector_store: Store holding one embedding per document
            similarity_floor: Candidates below this similarity are dropped,
                not kept with a zero score
        """
        self.vector_store = vector_store
        self.similarity_floor = similarity_floor

    def search(
        self,
        query_vector: Sequence[float],
        similarity_floor: Optional[float] = None,
    ) -> list[VectorCandidate]:
        """
        Score every stored embedding against the query vector.

        Returns:
            Candidates with similarity >= floor, sorted by similarity
            descending, then id
        """
        floor = self.similarity_floor if similarity_floor is None else similarity_floor

        candidates = [
            VectorCandidate(id=doc_id, score=similarity)
            for doc_id, similarity in self.vector_store.search(query_vector)
            if similarity >= floor
        ]
        candidates.sort(key=lambda c: (-c.score, c.id))

        self.logger.debug(
            "Vector search completed",
            scanned=len(self.vector_store),
            candidates=len(candidates),
            similarity_floor=floor,
        )

        return candidates
