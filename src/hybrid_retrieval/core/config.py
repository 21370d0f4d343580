"""
Hybrid Retrieval Engine - Configuration Management
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import yaml

from hybrid_retrieval.core.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Application settings loaded from environment variables and config files."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Application
    # -------------------------------------------------------------------------
    RETRIEVAL_ENV: str = Field(default="development", description="Environment name")
    DEBUG: bool = Field(default=False, description="Debug mode")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")

    # -------------------------------------------------------------------------
    # Server
    # -------------------------------------------------------------------------
    HOST: str = Field(default="0.0.0.0", description="Server host")
    PORT: int = Field(default=8000, description="Server port")
    WORKERS: int = Field(default=1, description="Number of workers")

    # -------------------------------------------------------------------------
    # Embeddings
    # -------------------------------------------------------------------------
    EMBEDDING_PROVIDER: str = Field(default="hashing", description="Embedding provider: hashing, openai")
    EMBEDDING_MODEL: str = Field(default="text-embedding-3-small", description="Embedding model")
    EMBEDDING_DIMENSIONS: int = Field(default=384, description="Embedding dimensions")
    OPENAI_API_KEY: Optional[str] = Field(default=None, description="OpenAI API key")

    @field_validator("EMBEDDING_DIMENSIONS")
    @classmethod
    def validate_dimensions(cls, v):
        """Embedding dimension must be positive."""
        if v <= 0:
            raise ValueError("EMBEDDING_DIMENSIONS must be a positive integer")
        return v

    # -------------------------------------------------------------------------
    # Retrieval
    # -------------------------------------------------------------------------
    DEFAULT_TOP_K: int = Field(default=10, ge=1, description="Default number of results")
    LEXICAL_WEIGHT: float = Field(default=0.3, ge=0.0, description="Fusion weight for lexical scores")
    VECTOR_WEIGHT: float = Field(default=0.7, ge=0.0, description="Fusion weight for vector scores")
    MIN_RELEVANCE: float = Field(default=0.0, description="Default minimum relevance of returned results")
    VECTOR_SIMILARITY_FLOOR: float = Field(
        default=0.3,
        ge=-1.0,
        le=1.0,
        description="Vector candidates below this cosine similarity are dropped",
    )

    # -------------------------------------------------------------------------
    # Reranking
    # -------------------------------------------------------------------------
    ENABLE_RERANKING: bool = Field(default=True, description="Rerank fused results by default")
    RERANK_FUSED_WEIGHT: float = Field(default=0.6, ge=0.0, description="Weight of the fused score")
    RERANK_OVERLAP_WEIGHT: float = Field(default=0.4, ge=0.0, description="Weight of term overlap")

    # -------------------------------------------------------------------------
    # Query Expansion
    # -------------------------------------------------------------------------
    SYNONYMS_FILE: Optional[str] = Field(
        default=None,
        description="YAML file with extra synonym entries (term -> list of phrases)",
    )

    # -------------------------------------------------------------------------
    # Seeding
    # -------------------------------------------------------------------------
    SEED_SAMPLE_DOCUMENTS: bool = Field(
        default=False,
        description="Load the bundled sample documents when the API starts",
    )

    def load_synonyms(self) -> dict[str, list[str]]:
        """Load the extra synonym table, if one is configured."""
        if not self.SYNONYMS_FILE:
            return {}
        synonyms = load_yaml_config(Path(self.SYNONYMS_FILE))
        if not isinstance(synonyms, dict):
            raise ConfigurationError(
                f"Synonyms file {self.SYNONYMS_FILE} must contain a mapping of term to phrases"
            )
        return synonyms


def load_yaml_config(path: Path) -> dict:
    """Load a YAML configuration file, returning an empty dict when missing."""
    if path.exists():
        with open(path, encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    return {}


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
