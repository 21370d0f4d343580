"""
Hybrid Retrieval Engine - Filters Module
"""

from __future__ import annotations

from hybrid_retrieval.retrieval.filters.metadata import (
    FilterCondition,
    FilterOperator,
    MetadataFilter,
)

__all__ = [
    "FilterCondition",
    "FilterOperator",
    "MetadataFilter",
]
