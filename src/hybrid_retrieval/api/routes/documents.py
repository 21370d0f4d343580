"""
Hybrid Retrieval Engine - Documents API Routes
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel, Field

from hybrid_retrieval.api.dependencies import get_engine
from hybrid_retrieval.core.types import Document
from hybrid_retrieval.retrieval.engine import RetrievalEngine


router = APIRouter()


class DocumentCreateRequest(BaseModel):
    """Request schema for document ingestion."""
    text: str = Field(..., min_length=1, description="Document text")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Arbitrary metadata")
    id: Optional[str] = Field(None, min_length=1, description="Optional document id")


class DocumentCreateResponse(BaseModel):
    """Response schema for document ingestion."""
    id: str


@router.post("/documents", response_model=DocumentCreateResponse, status_code=201)
async def add_document(
    request: DocumentCreateRequest,
    engine: RetrievalEngine = Depends(get_engine),
):
    """Index a document for search."""
    doc_id = await engine.add_document(
        text=request.text,
        metadata=request.metadata,
        doc_id=request.id,
    )
    return DocumentCreateResponse(id=doc_id)


@router.get("/documents/{document_id}", response_model=Document)
async def get_document(
    document_id: str,
    engine: RetrievalEngine = Depends(get_engine),
):
    """Get document details."""
    document = engine.get_document(document_id)
    if document is None:
        raise HTTPException(status_code=404, detail="Document not found")
    return document


@router.delete("/documents/{document_id}", status_code=204)
async def delete_document(
    document_id: str,
    engine: RetrievalEngine = Depends(get_engine),
):
    """Remove a document from the store and both indexes."""
    if not engine.remove_document(document_id):
        raise HTTPException(status_code=404, detail="Document not found")
    return Response(status_code=204)
