"""
Hybrid Retrieval Engine - Retrieval Engine

Facade over ingestion and search. One query runs:

    expand -> lexical ∥ vector retrieval -> fuse -> rerank -> filter -> truncate

Only the lexical stage sees the expanded query. The vector stage embeds the
query as written, so a document holding the synonym phrases cannot outscore
the document the query was copied from.

The document store, lexical index and vector store are updated as one unit
under a read/write lock, so a search observes either the state before or
after any ingestion, never a half-indexed document.
"""

from __future__ import annotations

import copy
import time
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional
from uuid import uuid4

from hybrid_retrieval.core.config import Settings, get_settings
from hybrid_retrieval.core.exceptions import (
    DuplicateDocumentError,
    EmbeddingError,
    ValidationError,
)
from hybrid_retrieval.core.logging import LoggerMixin
from hybrid_retrieval.core.types import (
    Document,
    FusionWeights,
    IndexStats,
    ScoreBreakdown,
    SearchOptions,
    SearchResult,
)
from hybrid_retrieval.ingestion.embeddings import (
    EmbeddingProvider,
    HashingEmbeddings,
    get_embedding_provider,
)
from hybrid_retrieval.retrieval.filters import MetadataFilter
from hybrid_retrieval.retrieval.query import QueryExpander
from hybrid_retrieval.retrieval.reranking import OverlapReranker, Reranker
from hybrid_retrieval.retrieval.search import (
    FusedCandidate,
    FusionScorer,
    LexicalIndex,
    VectorSearcher,
    distinct_terms,
)
from hybrid_retrieval.storage import (
    InMemoryDocumentStore,
    InMemoryVectorStore,
    ReadWriteLock,
)

# Bytes per stored embedding component, as reported by stats()
_FLOAT_BYTES = 8


@dataclass
class EngineConfig:
    """Defaults for a RetrievalEngine."""
    embedding_dimension: int = 384
    default_top_k: int = 10
    lexical_weight: float = 0.3
    vector_weight: float = 0.7
    min_relevance: float = 0.0
    vector_similarity_floor: float = 0.3
    enable_reranking: bool = True
    rerank_fused_weight: float = 0.6
    rerank_overlap_weight: float = 0.4

    @classmethod
    def from_settings(cls, config: Optional[Settings] = None) -> "EngineConfig":
        config = config or get_settings()
        return cls(
            embedding_dimension=config.EMBEDDING_DIMENSIONS,
            default_top_k=config.DEFAULT_TOP_K,
            lexical_weight=config.LEXICAL_WEIGHT,
            vector_weight=config.VECTOR_WEIGHT,
            min_relevance=config.MIN_RELEVANCE,
            vector_similarity_floor=config.VECTOR_SIMILARITY_FLOOR,
            enable_reranking=config.ENABLE_RERANKING,
            rerank_fused_weight=config.RERANK_FUSED_WEIGHT,
            rerank_overlap_weight=config.RERANK_OVERLAP_WEIGHT,
        )

    def default_options(self) -> SearchOptions:
        """Search options used when a caller passes none."""
        return SearchOptions(
            top_k=self.default_top_k,
            weights=FusionWeights(lexical=self.lexical_weight, vector=self.vector_weight),
            min_relevance=self.min_relevance,
            use_reranking=self.enable_reranking,
        )


@dataclass
class SearchResponse:
    """Search results plus how the query was processed."""
    query: str
    expanded_query: str
    results: list[SearchResult]
    lexical_candidates: int = 0
    vector_candidates: int = 0
    fused_candidates: int = 0
    latency_ms: float = 0.0

    @property
    def total(self) -> int:
        return len(self.results)


@dataclass
class _Ranked:
    candidate: FusedCandidate
    score: float
    overlap: Optional[float] = None
    reranked: Optional[float] = None


@dataclass
class _Snapshot:
    """Everything a search reads from the indexes, taken under one read lock."""
    lexical: list = field(default_factory=list)
    vector: list = field(default_factory=list)
    documents: dict[str, Document] = field(default_factory=dict)
    term_sets: dict[str, frozenset[str]] = field(default_factory=dict)


class RetrievalEngine(LoggerMixin):
    """
    Hybrid lexical + semantic retrieval over short text documents.

    Each engine owns its own stores; create as many independent instances
    as needed.
    """

    def __init__(
        self,
        embedding_provider: Optional[EmbeddingProvider] = None,
        config: Optional[EngineConfig] = None,
        query_expander: Optional[QueryExpander] = None,
        reranker: Optional[Reranker] = None,
        fusion_scorer: Optional[FusionScorer] = None,
    ):
        self.config = config or EngineConfig()
        self.embedding_provider = embedding_provider or HashingEmbeddings(
            dimensions=self.config.embedding_dimension,
        )
        self.query_expander = query_expander or QueryExpander()
        self.reranker = reranker or OverlapReranker(
            fused_weight=self.config.rerank_fused_weight,
            overlap_weight=self.config.rerank_overlap_weight,
        )
        self.fusion_scorer = fusion_scorer or FusionScorer()

        self._documents = InMemoryDocumentStore()
        self._lexical_index = LexicalIndex()
        self._vector_store = InMemoryVectorStore(dimension=self.embedding_provider.dimensions)
        self._vector_searcher = VectorSearcher(
            self._vector_store,
            similarity_floor=self.config.vector_similarity_floor,
        )
        self._lock = ReadWriteLock()

    @classmethod
    def from_settings(cls, config: Optional[Settings] = None) -> "RetrievalEngine":
        """Build an engine wired from application settings."""
        config = config or get_settings()
        return cls(
            embedding_provider=get_embedding_provider(config=config),
            config=EngineConfig.from_settings(config),
            query_expander=QueryExpander(extra_synonyms=config.load_synonyms()),
        )

    # =========================================================================
    # Ingestion
    # =========================================================================

    @staticmethod
    def _validate_document(
        text: Any,
        metadata: Any,
        doc_id: Any,
    ) -> tuple[str, dict[str, Any], Optional[str]]:
        if text is None:
            raise ValidationError("Document text is required", field="text")
        if not isinstance(text, str):
            raise ValidationError("Document text must be a string", field="text")
        if not text.strip():
            raise ValidationError("Document text must not be empty", field="text")

        if metadata is None:
            metadata = {}
        elif not isinstance(metadata, Mapping):
            raise ValidationError("Document metadata must be a mapping", field="metadata")

        if doc_id is not None and (not isinstance(doc_id, str) or not doc_id.strip()):
            raise ValidationError("Document id must be a non-empty string", field="id")

        return text, copy.deepcopy(dict(metadata)), doc_id

    @staticmethod
    def _new_id() -> str:
        return f"doc_{uuid4().hex}"

    def _store(self, document: Document, embedding: list[float]) -> None:
        """Write one document to all three structures. Caller holds the write lock."""
        self._documents.save(document)
        self._lexical_index.index(document.id, document.text)
        self._vector_store.upsert(document.id, embedding)

    async def add_document(
        self,
        text: str,
        metadata: Optional[Mapping[str, Any]] = None,
        doc_id: Optional[str] = None,
    ) -> str:
        """
        Ingest a document.

        Args:
            text: Document text (required, non-blank)
            metadata: Arbitrary key-value metadata
            doc_id: Optional caller-chosen id; generated when omitted

        Returns:
            The document id

        Raises:
            ValidationError: If text is missing/blank or metadata is not a mapping
            DuplicateDocumentError: If doc_id is already stored
            EmbeddingError: If the embedding provider fails
        """
        text, metadata, doc_id = self._validate_document(text, metadata, doc_id)
        doc_id = doc_id or self._new_id()

        if doc_id in self._documents:
            raise DuplicateDocumentError(doc_id)

        # Embed outside the lock; only the index update is serialized
        embedding = await self.embedding_provider.embed_text(text)
        document = Document(id=doc_id, text=text, metadata=metadata)

        with self._lock.write():
            if doc_id in self._documents:
                raise DuplicateDocumentError(doc_id)
            self._store(document, embedding)
            document_count = len(self._documents)

        self.logger.info(
            "Document added",
            doc_id=doc_id,
            text_length=len(text),
            document_count=document_count,
        )

        return doc_id

    async def add_documents(self, documents: Iterable[Mapping[str, Any]]) -> list[str]:
        """
        Ingest several documents at once.

        Each document should have: text, metadata (optional), id (optional).
        The batch is validated and embedded as a whole before anything is
        stored; a rejected batch leaves the engine unchanged.
        """
        prepared: list[tuple[str, dict[str, Any], str]] = []
        seen: set[str] = set()

        for item in documents:
            if not isinstance(item, Mapping):
                raise ValidationError("Each document must be a mapping", field="documents")
            text, metadata, doc_id = self._validate_document(
                item.get("text"), item.get("metadata"), item.get("id"),
            )
            doc_id = doc_id or self._new_id()
            if doc_id in seen or doc_id in self._documents:
                raise DuplicateDocumentError(doc_id)
            seen.add(doc_id)
            prepared.append((text, metadata, doc_id))

        if not prepared:
            return []

        result = await self.embedding_provider.embed_texts([text for text, _, _ in prepared])

        with self._lock.write():
            for _, _, doc_id in prepared:
                if doc_id in self._documents:
                    raise DuplicateDocumentError(doc_id)
            for (text, metadata, doc_id), embedding in zip(prepared, result.embeddings):
                self._store(Document(id=doc_id, text=text, metadata=metadata), embedding)
            document_count = len(self._documents)

        self.logger.info(
            "Added documents",
            num_documents=len(prepared),
            document_count=document_count,
        )

        return [doc_id for _, _, doc_id in prepared]

    def remove_document(self, doc_id: str) -> bool:
        """Remove a document from the store and both indexes."""
        with self._lock.write():
            if not self._documents.delete(doc_id):
                return False
            self._lexical_index.remove(doc_id)
            self._vector_store.delete(doc_id)

        self.logger.info("Document removed", doc_id=doc_id)
        return True

    def get_document(self, doc_id: str) -> Optional[Document]:
        """A copy of the stored document; changing it does not touch the store."""
        with self._lock.read():
            document = self._documents.get(doc_id)
        return document.model_copy(deep=True) if document is not None else None

    def clear(self) -> None:
        """Remove every document."""
        with self._lock.write():
            self._documents.clear()
            self._lexical_index.clear()
            self._vector_store.clear()

        self.logger.info("Engine cleared")

    # =========================================================================
    # Search
    # =========================================================================

    async def search(
        self,
        query: str,
        options: Optional[SearchOptions] = None,
    ) -> list[SearchResult]:
        """
        Search the indexed documents.

        Args:
            query: Natural-language query
            options: top_k, fusion weights, min_relevance, use_reranking,
                fusion_method, metadata filters

        Returns:
            Results sorted by relevance_score, non-increasing. A query that
            matches nothing returns an empty list.
        """
        response = await self.search_with_details(query, options)
        return response.results

    async def search_with_details(
        self,
        query: str,
        options: Optional[SearchOptions] = None,
    ) -> SearchResponse:
        """Like search(), but also reports the expanded query and stage counts."""
        start_time = time.time()
        options = options or self.config.default_options()

        if not isinstance(query, str) or not query.strip():
            return SearchResponse(query=query or "", expanded_query="", results=[])

        metadata_filter = MetadataFilter.from_dict(options.filters)

        expanded_query = self.query_expander.expand(query)
        query_vector = await self._embed_query(query)

        snapshot = self._collect_candidates(expanded_query, query_vector)

        fused = self.fusion_scorer.fuse(
            snapshot.lexical,
            snapshot.vector,
            weights=options.weights,
            method=options.fusion_method,
        )

        if options.use_reranking:
            ranked = await self._rerank(query, fused, snapshot)
        else:
            ranked = [_Ranked(candidate=c, score=c.score) for c in fused]

        query_terms = distinct_terms(query)
        results: list[SearchResult] = []
        for entry in ranked:
            if len(results) >= options.top_k:
                break
            if entry.score < options.min_relevance:
                continue
            document = snapshot.documents.get(entry.candidate.id)
            if document is None:
                continue
            if metadata_filter and not metadata_filter.matches(document.metadata):
                continue
            results.append(self._build_result(
                entry,
                document,
                query_terms,
                snapshot.term_sets.get(document.id, frozenset()),
            ))

        latency_ms = (time.time() - start_time) * 1000

        self.logger.info(
            "Search completed",
            query_length=len(query),
            expanded=expanded_query != query,
            lexical_candidates=len(snapshot.lexical),
            vector_candidates=len(snapshot.vector),
            fused_candidates=len(fused),
            results=len(results),
            latency_ms=round(latency_ms, 2),
        )

        return SearchResponse(
            query=query,
            expanded_query=expanded_query,
            results=results,
            lexical_candidates=len(snapshot.lexical),
            vector_candidates=len(snapshot.vector),
            fused_candidates=len(fused),
            latency_ms=latency_ms,
        )

    async def _embed_query(self, text: str) -> Optional[list[float]]:
        """Embed the query; a provider failure degrades the search to lexical-only."""
        try:
            return await self.embedding_provider.embed_query(text)
        except EmbeddingError as e:
            self.logger.warning(
                "Query embedding failed, continuing with lexical search only",
                error=str(e),
            )
            return None

    def _collect_candidates(
        self,
        expanded_query: str,
        query_vector: Optional[list[float]],
    ) -> _Snapshot:
        with self._lock.read():
            lexical = self._lexical_index.search(expanded_query)
            vector = (
                self._vector_searcher.search(query_vector)
                if query_vector is not None
                else []
            )
            candidate_ids = [c.id for c in lexical] + [c.id for c in vector]
            documents = self._documents.get_many(candidate_ids)
            term_sets = {
                doc_id: self._lexical_index.terms_for(doc_id)
                for doc_id in documents
            }

        return _Snapshot(
            lexical=lexical,
            vector=vector,
            documents=documents,
            term_sets=term_sets,
        )

    async def _rerank(
        self,
        query: str,
        fused: list[FusedCandidate],
        snapshot: _Snapshot,
    ) -> list[_Ranked]:
        result = await self.reranker.rerank(
            query,
            fused,
            contents={doc_id: doc.text for doc_id, doc in snapshot.documents.items()},
            term_cache=snapshot.term_sets,
        )
        return [
            _Ranked(
                candidate=r.candidate,
                score=r.score,
                overlap=r.overlap,
                reranked=r.score,
            )
            for r in result.results
        ]

    @staticmethod
    def _build_result(
        entry: _Ranked,
        document: Document,
        query_terms: list[str],
        doc_terms: frozenset[str],
    ) -> SearchResult:
        matched = [term for term in query_terms if term in doc_terms]
        explanation = (
            f"Matched {len(matched)} terms: {', '.join(matched)}. "
            f"Relevance: {entry.score * 100:.1f}%"
        )
        return SearchResult(
            id=document.id,
            text=document.text,
            relevance_score=entry.score,
            raw_scores=ScoreBreakdown(
                lexical=entry.candidate.lexical_score,
                vector=entry.candidate.vector_score,
                fused=entry.candidate.score,
                overlap=entry.overlap,
                reranked=entry.reranked,
            ),
            metadata=copy.deepcopy(document.metadata),
            explanation=explanation,
        )

    # =========================================================================
    # Status
    # =========================================================================

    def stats(self) -> IndexStats:
        """Current index sizes. Read-only."""
        with self._lock.read():
            document_count = len(self._documents)
            term_count = self._lexical_index.term_count

        dimension = self._vector_store.dimension
        return IndexStats(
            document_count=document_count,
            indexed_term_count=term_count,
            embedding_dimension=dimension,
            storage_size_bytes=document_count * dimension * _FLOAT_BYTES,
        )
