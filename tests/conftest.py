"""
Hybrid Retrieval Engine - Test Configuration and Fixtures
"""
from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from hybrid_retrieval.ingestion.embeddings.base import EmbeddingProvider, EmbeddingResult
from hybrid_retrieval.ingestion.embeddings.hashing import HashingEmbeddings
from hybrid_retrieval.retrieval.engine import EngineConfig, RetrievalEngine


# =============================================================================
# Core Fixtures
# =============================================================================

@pytest.fixture
def sample_texts() -> list[str]:
    """A handful of short technical documents."""
    return [
        "PostgreSQL database with Prisma ORM",
        "Advanced caching strategies with TTL management",
        "Real-time chat system with WebSocket and Redis",
        "Machine learning model serving and inference",
    ]


@pytest.fixture
def engine_config() -> EngineConfig:
    """Engine defaults matching the documented pipeline constants."""
    return EngineConfig(embedding_dimension=384)


@pytest.fixture
def hashing_embeddings() -> HashingEmbeddings:
    """Deterministic local embedding provider."""
    return HashingEmbeddings(dimensions=384)


# =============================================================================
# Engine Fixtures
# =============================================================================

@pytest.fixture
def engine(engine_config, hashing_embeddings) -> RetrievalEngine:
    """An empty engine."""
    return RetrievalEngine(embedding_provider=hashing_embeddings, config=engine_config)


@pytest.fixture
async def sample_engine(engine) -> RetrievalEngine:
    """An engine seeded with the bundled sample documents."""
    from hybrid_retrieval.ingestion.samples import seed_sample_documents

    await seed_sample_documents(engine)
    return engine


@pytest.fixture
def failing_embeddings() -> EmbeddingProvider:
    """Provider whose every call fails like an unreachable remote API."""
    from hybrid_retrieval.core.exceptions import EmbeddingError

    class _FailingEmbeddings(EmbeddingProvider):
        model_name = "failing"
        dimensions = 8

        async def embed_texts(self, texts, batch_size=None) -> EmbeddingResult:
            raise EmbeddingError("provider unavailable")

    return _FailingEmbeddings()


@pytest.fixture
def mock_embeddings() -> AsyncMock:
    """Mock embedding provider returning a fixed 4-d vector."""
    provider = AsyncMock(spec=EmbeddingProvider)
    provider.dimensions = 4
    provider.model_name = "mock"
    provider.embed_text.return_value = [1.0, 0.0, 0.0, 0.0]
    provider.embed_query.return_value = [1.0, 0.0, 0.0, 0.0]
    provider.embed_texts.side_effect = lambda texts, batch_size=None: EmbeddingResult(
        embeddings=[[1.0, 0.0, 0.0, 0.0] for _ in texts],
        model="mock",
        dimensions=4,
        tokens_used=0,
    )
    return provider


# =============================================================================
# API Fixtures
# =============================================================================

@pytest.fixture
def test_client(engine):
    """Create a test client for the FastAPI app around a fresh engine."""
    from fastapi.testclient import TestClient
    from hybrid_retrieval.app import create_app

    with TestClient(create_app(engine=engine)) as client:
        yield client


@pytest.fixture
async def async_test_client(engine):
    """Create an async test client."""
    from httpx import ASGITransport, AsyncClient
    from hybrid_retrieval.app import create_app

    async with AsyncClient(
        transport=ASGITransport(app=create_app(engine=engine)),
        base_url="http://test",
    ) as client:
        yield client
