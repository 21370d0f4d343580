"""
Hybrid Retrieval Engine - API Routes
"""

from __future__ import annotations

from hybrid_retrieval.api.routes import documents, health, search

__all__ = ["documents", "health", "search"]
