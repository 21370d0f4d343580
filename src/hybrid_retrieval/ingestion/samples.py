"""
Hybrid Retrieval Engine - Sample Documents

Short onboarding texts used to seed a fresh engine for demos and smoke tests.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from hybrid_retrieval.core.logging import get_logger

if TYPE_CHECKING:
    from hybrid_retrieval.retrieval.engine import RetrievalEngine

logger = get_logger(__name__)

SAMPLE_DOCUMENTS: list[str] = [
    "User authentication with NextAuth.js and OAuth providers",
    "Real-time chat system with WebSocket and Redis",
    "PostgreSQL database with Prisma ORM",
    "Advanced caching strategies with TTL management",
    "Machine learning model serving and inference",
    "Vector search with semantic embeddings",
    "Quantum algorithms for optimization",
    "Autonomous agent for continuous improvement",
    "API rate limiting and request validation",
    "Security headers and CORS configuration",
]


async def seed_sample_documents(engine: "RetrievalEngine") -> list[str]:
    """Add the sample documents to an engine, with ids doc_0 .. doc_9."""
    ids = await engine.add_documents([
        {
            "id": f"doc_{idx}",
            "text": text,
            "metadata": {"index": idx, "source": "documentation"},
        }
        for idx, text in enumerate(SAMPLE_DOCUMENTS)
    ])
    logger.info("Seeded sample documents", num_documents=len(ids))
    return ids
