"""
Hybrid Retrieval Engine - Custom Exceptions
"""

from typing import Any, Optional


class HybridRetrievalError(Exception):
    """Base exception for all retrieval engine errors."""

    def __init__(
        self,
        message: str,
        code: str = "RETRIEVAL_ENGINE_ERROR",
        details: Optional[dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)


# =============================================================================
# Ingestion Exceptions
# =============================================================================

class IngestionError(HybridRetrievalError):
    """Base exception for ingestion errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message, code="INGESTION_ERROR", details=details)


class DuplicateDocumentError(IngestionError):
    """Raised when a caller-supplied document id is already stored."""

    def __init__(self, document_id: str):
        super().__init__(
            message=f"Document {document_id} already exists",
            details={"document_id": document_id},
        )
        self.code = "DUPLICATE_DOCUMENT"


class EmbeddingError(IngestionError):
    """Raised when embedding generation fails."""
    pass


# =============================================================================
# Validation Exceptions
# =============================================================================

class ValidationError(HybridRetrievalError):
    """Raised when validation fails."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            details={"field": field} if field else {},
        )


# =============================================================================
# Configuration Exceptions
# =============================================================================

class ConfigurationError(HybridRetrievalError):
    """Raised when configuration is invalid."""

    def __init__(self, message: str):
        super().__init__(message, code="CONFIGURATION_ERROR")
