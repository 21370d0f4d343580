"""
Hybrid Retrieval Engine - OpenAI Embeddings Provider
"""

from __future__ import annotations

from typing import Optional

from openai import (
    APIConnectionError,
    APITimeoutError,
    AsyncOpenAI,
    InternalServerError,
    RateLimitError,
)
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from hybrid_retrieval.core.config import settings
from hybrid_retrieval.core.exceptions import EmbeddingError
from hybrid_retrieval.ingestion.embeddings.base import EmbeddingProvider, EmbeddingResult

_TRANSIENT_ERRORS = (
    APIConnectionError,
    APITimeoutError,
    InternalServerError,
    RateLimitError,
)


class OpenAIEmbeddings(EmbeddingProvider):
    """OpenAI embeddings provider."""

    # Model dimension mappings
    MODEL_DIMENSIONS = {
        "text-embedding-3-large": 3072,
        "text-embedding-3-small": 1536,
        "text-embedding-ada-002": 1536,
    }

    DEFAULT_BATCH_SIZE = 100

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        dimensions: Optional[int] = None,
    ):
        self._api_key = api_key or settings.OPENAI_API_KEY
        self._model = model or settings.EMBEDDING_MODEL
        self._dimensions = dimensions or settings.EMBEDDING_DIMENSIONS
        self._client: Optional[AsyncOpenAI] = None

    def _get_client(self) -> AsyncOpenAI:
        """Get or create the OpenAI client."""
        if self._client is None:
            if not self._api_key:
                raise EmbeddingError("OpenAI API key not configured")
            self._client = AsyncOpenAI(api_key=self._api_key)
        return self._client

    @property
    def model_name(self) -> str:
        return self._model

    @property
    def dimensions(self) -> int:
        if self._dimensions:
            return self._dimensions
        return self.MODEL_DIMENSIONS.get(self._model, 1536)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type(_TRANSIENT_ERRORS),
        reraise=True,
    )
    async def _create_batch(self, client: AsyncOpenAI, batch: list[str]):
        kwargs = {"model": self._model, "input": batch}
        # Only the text-embedding-3 family accepts a dimensions override
        if self._model.startswith("text-embedding-3"):
            kwargs["dimensions"] = self.dimensions
        return await client.embeddings.create(**kwargs)

    async def embed_texts(
        self,
        texts: list[str],
        batch_size: Optional[int] = None,
    ) -> EmbeddingResult:
        """Generate embeddings using OpenAI API."""
        if not texts:
            return EmbeddingResult(
                embeddings=[],
                model=self._model,
                dimensions=self.dimensions,
                tokens_used=0,
            )

        client = self._get_client()
        batch_size = batch_size or self.DEFAULT_BATCH_SIZE

        all_embeddings: list[list[float]] = []
        total_tokens = 0

        for i in range(0, len(texts), batch_size):
            # The API rejects empty strings; a single space embeds the same "nothing"
            batch = [text if text.strip() else " " for text in texts[i:i + batch_size]]

            try:
                response = await self._create_batch(client, batch)
            except Exception as e:
                self.logger.error(
                    "Embedding generation failed",
                    error=str(e),
                    batch_start=i,
                )
                raise EmbeddingError(f"Failed to generate embeddings: {e}")

            # Extract embeddings in order
            batch_embeddings: list[list[float]] = [[] for _ in batch]
            for item in response.data:
                batch_embeddings[item.index] = list(item.embedding)

            all_embeddings.extend(batch_embeddings)
            total_tokens += response.usage.total_tokens

            self.logger.debug(
                "Generated embeddings batch",
                batch_num=i // batch_size + 1,
                batch_size=len(batch),
                tokens=response.usage.total_tokens,
            )

        self.logger.info(
            "Generated embeddings",
            num_texts=len(texts),
            total_tokens=total_tokens,
            model=self._model,
        )

        return EmbeddingResult(
            embeddings=all_embeddings,
            model=self._model,
            dimensions=self.dimensions,
            tokens_used=total_tokens,
        )
