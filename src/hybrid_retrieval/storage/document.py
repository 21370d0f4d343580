"""
Hybrid Retrieval Engine - In-Memory Document Store

Source of truth for document text and metadata. Both indexes only hold
document ids and can always be rebuilt from the documents kept here.
"""

from __future__ import annotations

from typing import Iterator, Optional

from hybrid_retrieval.core.exceptions import DuplicateDocumentError
from hybrid_retrieval.core.logging import LoggerMixin
from hybrid_retrieval.core.types import Document


class InMemoryDocumentStore(LoggerMixin):
    """
    Insertion-ordered mapping of document id to Document.

    Callers serialize access; see ReadWriteLock.
    """

    def __init__(self) -> None:
        self._documents: dict[str, Document] = {}

    def save(self, document: Document) -> str:
        """Store a new document, return its id."""
        if document.id in self._documents:
            raise DuplicateDocumentError(document.id)
        self._documents[document.id] = document
        return document.id

    def get(self, document_id: str) -> Optional[Document]:
        """Get a document by id."""
        return self._documents.get(document_id)

    def get_many(self, document_ids: list[str]) -> dict[str, Document]:
        """Get the stored documents among the given ids."""
        return {
            doc_id: self._documents[doc_id]
            for doc_id in document_ids
            if doc_id in self._documents
        }

    def delete(self, document_id: str) -> bool:
        """Delete a document by id."""
        return self._documents.pop(document_id, None) is not None

    def list(self, limit: int = 100, offset: int = 0) -> list[Document]:
        """List documents in insertion order."""
        documents = list(self._documents.values())
        return documents[offset:offset + limit]

    def clear(self) -> None:
        self._documents.clear()

    def __contains__(self, document_id: object) -> bool:
        return document_id in self._documents

    def __len__(self) -> int:
        return len(self._documents)

    def __iter__(self) -> Iterator[Document]:
        return iter(self._documents.values())
