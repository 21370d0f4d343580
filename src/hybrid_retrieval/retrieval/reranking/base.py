"""
Hybrid Retrieval Engine - Reranking Base Classes
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from hybrid_retrieval.core.logging import LoggerMixin
from hybrid_retrieval.retrieval.search.hybrid import FusedCandidate


@dataclass
class RerankedCandidate:
    """A fused candidate with its second-pass score."""
    candidate: FusedCandidate
    overlap: float
    score: float

    @property
    def id(self) -> str:
        return self.candidate.id


@dataclass
class RerankResult:
    """Result from reranking."""
    results: list[RerankedCandidate]
    original_count: int
    reranked_count: int
    latency_ms: float


class Reranker(ABC, LoggerMixin):
    """Abstract base class for rerankers."""

    @abstractmethod
    async def rerank(
        self,
        query: str,
        candidates: Sequence[FusedCandidate],
        contents: Mapping[str, str],
        term_cache: Optional[Mapping[str, frozenset[str]]] = None,
    ) -> RerankResult:
        """
        Rerank fused candidates based on query relevance.

        Args:
            query: The original (unexpanded) search query
            candidates: Fused candidates, best first
            contents: Candidate id -> document text
            term_cache: Candidate id -> normalized term set, when already known

        Returns:
            RerankResult with candidates sorted by their new score
        """
        pass
