"""
Hybrid Retrieval Engine - Hybrid Fusion

Merges lexical and vector candidates into one ranked list. The default
weighted fusion sums stage scores:

    fused(d) = lexical(d) * w_lexical + vector(d) * w_vector

with a stage that did not return d contributing 0. Weighted Reciprocal Rank
Fusion is available as an alternative:

    RRF(d) = Σ w_stage / (k + rank_stage(d))
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence

from hybrid_retrieval.core.logging import LoggerMixin
from hybrid_retrieval.core.types import FusionMethod, FusionWeights
from hybrid_retrieval.retrieval.search.sparse import LexicalCandidate
from hybrid_retrieval.retrieval.search.vector import VectorCandidate


@dataclass
class FusedCandidate:
    """Candidate after fusion, keeping the per-stage scores."""
    id: str
    score: float
    lexical_score: float = 0.0
    vector_score: float = 0.0
    matched_terms: list[str] = field(default_factory=list)


class FusionScorer(LoggerMixin):
    """Combines lexical and vector candidate sets into one ranking."""

    def __init__(self, rrf_k: int = 60):
        """
        Initialize fusion scorer.

        Args:
            rrf_k: RRF constant (higher = less emphasis on top ranks)
        """
        self.rrf_k = rrf_k

    def fuse(
        self,
        lexical_candidates: Sequence[LexicalCandidate],
        vector_candidates: Sequence[VectorCandidate],
        weights: Optional[FusionWeights] = None,
        method: FusionMethod = FusionMethod.WEIGHTED,
    ) -> list[FusedCandidate]:
        """
        Fuse both candidate sets.

        Returns:
            The union of candidates sorted by fused score descending, ties
            broken by id ascending
        """
        weights = weights or FusionWeights()

        if method == FusionMethod.RRF:
            fused = self._rrf_fusion(lexical_candidates, vector_candidates, weights)
        else:
            fused = self._weighted_fusion(lexical_candidates, vector_candidates, weights)

        fused.sort(key=lambda c: (-c.score, c.id))

        self.logger.debug(
            "Fused candidates",
            method=method.value,
            lexical=len(lexical_candidates),
            vector=len(vector_candidates),
            fused=len(fused),
        )

        return fused

    def _merge(
        self,
        lexical_candidates: Sequence[LexicalCandidate],
        vector_candidates: Sequence[VectorCandidate],
    ) -> dict[str, FusedCandidate]:
        """Union of both sets keyed by id, with raw stage scores filled in."""
        merged: dict[str, FusedCandidate] = {}

        for candidate in lexical_candidates:
            merged[candidate.id] = FusedCandidate(
                id=candidate.id,
                score=0.0,
                lexical_score=candidate.score,
                matched_terms=list(candidate.matched_terms),
            )

        for candidate in vector_candidates:
            entry = merged.get(candidate.id)
            if entry is None:
                merged[candidate.id] = FusedCandidate(
                    id=candidate.id,
                    score=0.0,
                    vector_score=candidate.score,
                )
            else:
                entry.vector_score = candidate.score

        return merged

    def _weighted_fusion(
        self,
        lexical_candidates: Sequence[LexicalCandidate],
        vector_candidates: Sequence[VectorCandidate],
        weights: FusionWeights,
    ) -> list[FusedCandidate]:
        merged = self._merge(lexical_candidates, vector_candidates)

        for candidate in merged.values():
            candidate.score = (
                candidate.lexical_score * weights.lexical
                + candidate.vector_score * weights.vector
            )

        return list(merged.values())

    def _rrf_fusion(
        self,
        lexical_candidates: Sequence[LexicalCandidate],
        vector_candidates: Sequence[VectorCandidate],
        weights: FusionWeights,
    ) -> list[FusedCandidate]:
        merged = self._merge(lexical_candidates, vector_candidates)

        ranked_lexical = sorted(lexical_candidates, key=lambda c: (-c.score, c.id))
        for rank, candidate in enumerate(ranked_lexical):
            merged[candidate.id].score += weights.lexical / (self.rrf_k + rank + 1)

        ranked_vector = sorted(vector_candidates, key=lambda c: (-c.score, c.id))
        for rank, candidate in enumerate(ranked_vector):
            merged[candidate.id].score += weights.vector / (self.rrf_k + rank + 1)

        return list(merged.values())
