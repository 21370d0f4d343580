"""
Hybrid Retrieval Engine - Embedding Provider Factory
"""

from __future__ import annotations

from typing import Optional

from hybrid_retrieval.core.config import Settings, get_settings
from hybrid_retrieval.core.exceptions import ConfigurationError
from hybrid_retrieval.ingestion.embeddings.base import EmbeddingProvider
from hybrid_retrieval.ingestion.embeddings.hashing import HashingEmbeddings

SUPPORTED_PROVIDERS = ("hashing", "openai")


def get_embedding_provider(
    provider: Optional[str] = None,
    config: Optional[Settings] = None,
) -> EmbeddingProvider:
    """
    Build an embedding provider.

    Args:
        provider: Provider name ("hashing", "openai").
                 Defaults to settings.EMBEDDING_PROVIDER
        config: Settings to read model, dimensions and credentials from

    Returns:
        A new EmbeddingProvider instance

    Raises:
        ConfigurationError: If the provider is not supported
    """
    config = config or get_settings()
    provider = (provider or config.EMBEDDING_PROVIDER).lower()

    if provider == "hashing":
        return HashingEmbeddings(dimensions=config.EMBEDDING_DIMENSIONS)

    if provider == "openai":
        # Imported lazily so the openai client is only built when selected
        from hybrid_retrieval.ingestion.embeddings.openai import OpenAIEmbeddings
        return OpenAIEmbeddings(
            api_key=config.OPENAI_API_KEY,
            model=config.EMBEDDING_MODEL,
            dimensions=config.EMBEDDING_DIMENSIONS,
        )

    raise ConfigurationError(
        f"Unsupported embedding provider: {provider}. "
        f"Supported providers: {', '.join(SUPPORTED_PROVIDERS)}"
    )
