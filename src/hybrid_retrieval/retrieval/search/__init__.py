"""
Hybrid Retrieval Engine - Search Module
"""

from hybrid_retrieval.retrieval.search.sparse import (
    LexicalIndex,
    LexicalCandidate,
    MIN_TERM_LENGTH,
    distinct_terms,
    tokenize,
)
from hybrid_retrieval.retrieval.search.vector import (
    VectorSearcher,
    VectorCandidate,
)
from hybrid_retrieval.retrieval.search.hybrid import (
    FusionScorer,
    FusedCandidate,
)

__all__ = [
    # Sparse
    "LexicalIndex",
    "LexicalCandidate",
    "MIN_TERM_LENGTH",
    "distinct_terms",
    "tokenize",
    # Vector
    "VectorSearcher",
    "VectorCandidate",
    # Hybrid
    "FusionScorer",
    "FusedCandidate",
]
