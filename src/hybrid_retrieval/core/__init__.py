"""
Hybrid Retrieval Engine - Core Module

This module provides core functionality used throughout the application:
- Configuration management
- Logging
- Custom exceptions
- Shared type definitions
"""

from hybrid_retrieval.core.config import Settings, get_settings, settings
from hybrid_retrieval.core.exceptions import (
    HybridRetrievalError,
    IngestionError,
    DuplicateDocumentError,
    EmbeddingError,
    ValidationError,
    ConfigurationError,
)
from hybrid_retrieval.core.logging import get_logger, setup_logging, LoggerMixin
from hybrid_retrieval.core.types import (
    # Enums
    FusionMethod,
    # Document types
    Document,
    # Search types
    FusionWeights,
    SearchOptions,
    ScoreBreakdown,
    SearchResult,
    IndexStats,
)

__all__ = [
    # Config
    "Settings",
    "get_settings",
    "settings",
    # Logging
    "get_logger",
    "setup_logging",
    "LoggerMixin",
    # Exceptions
    "HybridRetrievalError",
    "IngestionError",
    "DuplicateDocumentError",
    "EmbeddingError",
    "ValidationError",
    "ConfigurationError",
    # Enums
    "FusionMethod",
    # Document types
    "Document",
    # Search types
    "FusionWeights",
    "SearchOptions",
    "ScoreBreakdown",
    "SearchResult",
    "IndexStats",
]
