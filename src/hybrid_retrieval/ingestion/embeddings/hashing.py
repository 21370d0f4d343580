"""
Hybrid Retrieval Engine - Hashing Embeddings Provider

A dependency-free, deterministic stand-in for a learned embedding model.
Word tokens and character trigrams are hashed into a fixed number of signed
buckets (the "hashing trick") and the result is L2-normalized, so texts that
share vocabulary end up with a higher cosine similarity.
"""

from __future__ import annotations

import hashlib
import math
import re
from typing import Optional

from hybrid_retrieval.core.config import settings
from hybrid_retrieval.ingestion.embeddings.base import EmbeddingProvider, EmbeddingResult

_WORD_RE = re.compile(r"\w+")


class HashingEmbeddings(EmbeddingProvider):
    """Feature-hashing embeddings over words and character trigrams."""

    WORD_WEIGHT = 1.0
    TRIGRAM_WEIGHT = 0.5

    def __init__(self, dimensions: Optional[int] = None):
        self._dimensions = dimensions or settings.EMBEDDING_DIMENSIONS

    @property
    def model_name(self) -> str:
        return f"hashing-{self._dimensions}"

    @property
    def dimensions(self) -> int:
        return self._dimensions

    def _bucket(self, feature: str) -> tuple[int, float]:
        # blake2b instead of hash(): str hashing is salted per process
        digest = hashlib.blake2b(feature.encode("utf-8"), digest_size=8).digest()
        value = int.from_bytes(digest, "big")
        sign = -1.0 if value >> 63 else 1.0
        return value % self._dimensions, sign

    def embed(self, text: str) -> list[float]:
        """
        Embed a single text synchronously.

        Total over its input: empty text, or text without any word
        characters, maps to the all-zero vector.
        """
        vector = [0.0] * self._dimensions
        words = _WORD_RE.findall((text or "").lower())

        for word in words:
            index, sign = self._bucket(f"w:{word}")
            vector[index] += sign * self.WORD_WEIGHT

            padded = f" {word} "
            for i in range(len(padded) - 2):
                index, sign = self._bucket(f"c:{padded[i:i + 3]}")
                vector[index] += sign * self.TRIGRAM_WEIGHT

        magnitude = math.sqrt(sum(v * v for v in vector))
        if magnitude == 0.0:
            return vector
        return [v / magnitude for v in vector]

    async def embed_texts(
        self,
        texts: list[str],
        batch_size: Optional[int] = None,
    ) -> EmbeddingResult:
        """Generate embeddings for multiple texts (batch size is irrelevant here)."""
        embeddings = [self.embed(text) for text in texts]
        tokens_used = sum(len(_WORD_RE.findall((text or "").lower())) for text in texts)

        self.logger.debug(
            "Generated hashing embeddings",
            num_texts=len(texts),
            dimensions=self._dimensions,
        )

        return EmbeddingResult(
            embeddings=embeddings,
            model=self.model_name,
            dimensions=self._dimensions,
            tokens_used=tokens_used,
        )
