"""
Hybrid Retrieval Engine - Query Processing Module
"""

from __future__ import annotations

from hybrid_retrieval.retrieval.query.expansion import DEFAULT_SYNONYMS, QueryExpander

__all__ = [
    "DEFAULT_SYNONYMS",
    "QueryExpander",
]
