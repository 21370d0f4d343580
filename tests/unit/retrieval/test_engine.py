"""
Tests for hybrid_retrieval/retrieval/engine.py
"""

import asyncio

import pytest

from hybrid_retrieval.core.exceptions import (
    DuplicateDocumentError,
    EmbeddingError,
    ValidationError,
)
from hybrid_retrieval.core.types import FusionMethod, SearchOptions, SearchResult
from hybrid_retrieval.ingestion.samples import SAMPLE_DOCUMENTS
from hybrid_retrieval.retrieval.engine import EngineConfig, RetrievalEngine, SearchResponse


class TestEngineConfig:
    """Tests for EngineConfig."""

    def test_from_settings(self):
        """Test defaults are read from settings."""
        from hybrid_retrieval.core.config import Settings

        config = EngineConfig.from_settings(
            Settings(_env_file=None, DEFAULT_TOP_K=5, EMBEDDING_DIMENSIONS=64, ENABLE_RERANKING=False)
        )
        assert config.default_top_k == 5
        assert config.embedding_dimension == 64
        assert config.enable_reranking is False

    def test_default_options(self):
        """Test that default search options mirror the config."""
        options = EngineConfig(default_top_k=3, lexical_weight=0.5, vector_weight=0.5).default_options()
        assert options.top_k == 3
        assert options.weights.lexical == 0.5
        assert options.use_reranking is True

    def test_engine_from_settings(self):
        """Test building an engine from settings."""
        from hybrid_retrieval.core.config import Settings

        engine = RetrievalEngine.from_settings(Settings(_env_file=None, EMBEDDING_DIMENSIONS=32))
        assert engine.stats().embedding_dimension == 32


class TestAddDocument:
    """Tests for document ingestion."""

    @pytest.mark.asyncio
    async def test_add_document_increments_count(self, engine):
        """Test each successful add grows the document count by one."""
        for i, text in enumerate(["first document", "second document"], start=1):
            doc_id = await engine.add_document(text, {"n": i})
            assert doc_id.startswith("doc_")
            assert engine.stats().document_count == i

    @pytest.mark.asyncio
    async def test_stored_document(self, engine):
        """Test the stored document keeps text and metadata."""
        doc_id = await engine.add_document("PostgreSQL database", {"source": "docs"})

        document = engine.get_document(doc_id)
        assert document.text == "PostgreSQL database"
        assert document.metadata == {"source": "docs"}

    @pytest.mark.asyncio
    async def test_stored_metadata_cannot_be_mutated(self, engine):
        """Test callers cannot change a stored document through returned or passed metadata."""
        metadata = {"tags": ["sql"], "team": "data"}
        doc_id = await engine.add_document("PostgreSQL database", metadata)
        metadata["tags"].append("changed")

        fetched = engine.get_document(doc_id)
        fetched.metadata["team"] = "changed"

        result = (await engine.search("PostgreSQL database"))[0]
        result.metadata["tags"].append("changed")

        assert engine.get_document(doc_id).metadata == {"tags": ["sql"], "team": "data"}

    @pytest.mark.asyncio
    async def test_generated_ids_unique(self, engine):
        """Test generated ids never collide."""
        ids = {await engine.add_document("same text") for _ in range(20)}
        assert len(ids) == 20

    @pytest.mark.asyncio
    async def test_caller_supplied_id(self, engine):
        """Test a caller-chosen id is used as-is."""
        assert await engine.add_document("text here", doc_id="custom") == "custom"
        assert engine.get_document("custom") is not None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", [None, "", "   \n\t", 42])
    async def test_invalid_text_rejected(self, engine, text):
        """Test that absent, blank or non-string text is rejected without state change."""
        await engine.add_document("existing document")
        before = engine.stats()

        with pytest.raises(ValidationError) as exc_info:
            await engine.add_document(text)

        assert exc_info.value.details == {"field": "text"}
        assert engine.stats() == before

    @pytest.mark.asyncio
    async def test_invalid_metadata_rejected(self, engine):
        """Test that non-mapping metadata is rejected."""
        with pytest.raises(ValidationError):
            await engine.add_document("valid text", metadata=["not", "a", "mapping"])
        assert engine.stats().document_count == 0

    @pytest.mark.asyncio
    async def test_duplicate_id_rejected(self, engine):
        """Test re-using an id fails and keeps the original document."""
        await engine.add_document("original text", doc_id="doc_1")

        with pytest.raises(DuplicateDocumentError):
            await engine.add_document("replacement text", doc_id="doc_1")

        assert engine.get_document("doc_1").text == "original text"
        assert engine.stats().document_count == 1

    @pytest.mark.asyncio
    async def test_embedding_failure_leaves_no_state(self, failing_embeddings):
        """Test that a failed embedding stores nothing."""
        engine = RetrievalEngine(embedding_provider=failing_embeddings)

        with pytest.raises(EmbeddingError):
            await engine.add_document("some text")

        stats = engine.stats()
        assert stats.document_count == 0
        assert stats.indexed_term_count == 0


class TestAddDocuments:
    """Tests for batch ingestion."""

    @pytest.mark.asyncio
    async def test_batch_embeds_once(self, mock_embeddings):
        """Test a batch is embedded with a single provider call."""
        engine = RetrievalEngine(embedding_provider=mock_embeddings)
        ids = await engine.add_documents([
            {"text": "alpha document"},
            {"text": "beta document", "metadata": {"k": "v"}, "id": "beta"},
        ])

        assert len(ids) == 2
        assert ids[1] == "beta"
        assert engine.stats().document_count == 2
        mock_embeddings.embed_texts.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_invalid_batch_rejected_whole(self, engine):
        """Test that one bad document rejects the entire batch."""
        with pytest.raises(ValidationError):
            await engine.add_documents([{"text": "good document"}, {"text": ""}])
        assert engine.stats().document_count == 0

    @pytest.mark.asyncio
    async def test_duplicate_within_batch(self, engine):
        """Test that a repeated id inside one batch is rejected."""
        with pytest.raises(DuplicateDocumentError):
            await engine.add_documents([
                {"text": "one", "id": "x"},
                {"text": "two", "id": "x"},
            ])
        assert engine.stats().document_count == 0

    @pytest.mark.asyncio
    async def test_empty_batch(self, engine):
        """Test an empty batch is a no-op."""
        assert await engine.add_documents([]) == []


class TestSearch:
    """Tests for the search pipeline."""

    @pytest.mark.asyncio
    async def test_empty_engine(self, engine):
        """Test searching with no documents returns nothing."""
        assert await engine.search("database caching") == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("query", ["", "   "])
    async def test_blank_query(self, sample_engine, query):
        """Test that a blank query returns an empty list."""
        assert await sample_engine.search(query) == []

    @pytest.mark.asyncio
    async def test_no_match_returns_empty(self, mock_embeddings):
        """Test a query sharing nothing with the corpus is not an error."""
        engine = RetrievalEngine(embedding_provider=mock_embeddings)
        await engine.add_document("PostgreSQL database with Prisma ORM")
        mock_embeddings.embed_query.return_value = [0.0, 1.0, 0.0, 0.0]

        assert await engine.search("kubernetes helm") == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("query", [
        "database caching",
        "ai features",
        "real-time websocket chat",
        "security",
        "vector search with embeddings",
    ])
    async def test_results_sorted(self, sample_engine, query):
        """Test results come back in non-increasing relevance order."""
        results = await sample_engine.search(query)

        assert all(isinstance(r, SearchResult) for r in results)
        scores = [r.relevance_score for r in results]
        assert scores == sorted(scores, reverse=True)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("index", range(len(SAMPLE_DOCUMENTS)))
    async def test_exact_text_ranks_first(self, sample_engine, index):
        """Test a document's own text retrieves it first."""
        results = await sample_engine.search(SAMPLE_DOCUMENTS[index])
        assert results[0].id == f"doc_{index}"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("use_reranking", [True, False])
    async def test_exact_text_beats_document_of_its_synonyms(self, engine, use_reranking):
        """Test a document holding the query's synonym phrases does not outrank the exact match."""
        exact = await engine.add_document("ai tools")
        synonyms = await engine.add_document("ai tools artificial intelligence machine learning")

        results = await engine.search("ai tools", SearchOptions(use_reranking=use_reranking))

        assert [r.id for r in results][:2] == [exact, synonyms]
        assert results[0].raw_scores.vector == pytest.approx(1.0)

    @pytest.mark.asyncio
    async def test_vector_stage_embeds_original_query(self, mock_embeddings):
        """Test only the lexical stage sees the expanded query."""
        engine = RetrievalEngine(embedding_provider=mock_embeddings)
        await engine.add_document("artificial intelligence assistant")

        response = await engine.search_with_details("ai tools")

        assert response.expanded_query != "ai tools"
        mock_embeddings.embed_query.assert_awaited_once_with("ai tools")

    @pytest.mark.asyncio
    async def test_top_k(self, sample_engine):
        """Test truncation to top_k."""
        results = await sample_engine.search("with and for", SearchOptions(top_k=2, min_relevance=0.0))
        assert len(results) <= 2

    @pytest.mark.asyncio
    async def test_min_relevance(self, sample_engine):
        """Test that results below min_relevance are dropped."""
        results = await sample_engine.search("database caching", SearchOptions(min_relevance=0.2))
        assert all(r.relevance_score >= 0.2 for r in results)

        assert await sample_engine.search("database caching", SearchOptions(min_relevance=1.1)) == []

    @pytest.mark.asyncio
    async def test_without_reranking(self, sample_engine):
        """Test that disabling reranking reports the fused score."""
        results = await sample_engine.search("database caching", SearchOptions(use_reranking=False))

        assert results
        for result in results:
            assert result.relevance_score == result.raw_scores.fused
            assert result.raw_scores.reranked is None
            assert result.raw_scores.overlap is None

    @pytest.mark.asyncio
    async def test_reranked_scores_recorded(self, sample_engine):
        """Test that reranking records overlap and final scores."""
        results = await sample_engine.search("database caching")

        for result in results:
            assert result.raw_scores.overlap is not None
            assert result.relevance_score == result.raw_scores.reranked
            assert result.relevance_score == pytest.approx(
                result.raw_scores.fused * 0.6 + result.raw_scores.overlap * 0.4
            )

    @pytest.mark.asyncio
    async def test_rrf_fusion(self, sample_engine):
        """Test the RRF fusion option still retrieves exact matches first."""
        results = await sample_engine.search(
            SAMPLE_DOCUMENTS[2],
            SearchOptions(fusion_method=FusionMethod.RRF),
        )
        assert results[0].id == "doc_2"

    @pytest.mark.asyncio
    async def test_metadata_filters(self, sample_engine):
        """Test metadata filters restrict results."""
        results = await sample_engine.search(
            "database caching",
            SearchOptions(filters={"index": [3]}),
        )
        assert [r.id for r in results] == ["doc_3"]

        assert await sample_engine.search(
            "database caching",
            SearchOptions(filters={"source": "blog"}),
        ) == []

    @pytest.mark.asyncio
    async def test_explanation(self, sample_engine):
        """Test the human-readable explanation lists the matched terms."""
        results = await sample_engine.search("PostgreSQL database with Prisma ORM")
        top = results[0]

        assert top.explanation.startswith(
            "Matched 5 terms: postgresql, database, with, prisma, orm. Relevance: "
        )
        assert top.explanation.endswith("%")
        assert top.metadata == {"index": 2, "source": "documentation"}

    @pytest.mark.asyncio
    async def test_query_embedding_failure_degrades(self, mock_embeddings):
        """Test that search falls back to lexical results when embedding fails."""
        engine = RetrievalEngine(embedding_provider=mock_embeddings)
        doc_id = await engine.add_document("PostgreSQL database with Prisma ORM")
        mock_embeddings.embed_query.side_effect = EmbeddingError("provider unavailable")

        response = await engine.search_with_details("database")

        assert [r.id for r in response.results] == [doc_id]
        assert response.vector_candidates == 0
        assert response.results[0].raw_scores.vector == 0.0

    @pytest.mark.asyncio
    async def test_search_with_details(self, sample_engine):
        """Test the detailed response reports the expanded query."""
        response = await sample_engine.search_with_details("ai features")

        assert isinstance(response, SearchResponse)
        assert response.query == "ai features"
        assert response.expanded_query.startswith("ai features ")
        assert "artificial intelligence" in response.expanded_query
        assert response.total == len(response.results)
        assert response.lexical_candidates >= 1

    @pytest.mark.asyncio
    async def test_independent_instances(self, hashing_embeddings):
        """Test that engines do not share state."""
        first = RetrievalEngine(embedding_provider=hashing_embeddings)
        second = RetrievalEngine(embedding_provider=hashing_embeddings)
        await first.add_document("PostgreSQL database with Prisma ORM")

        assert second.stats().document_count == 0
        assert await second.search("database") == []


class TestRemoveAndClear:
    """Tests for removal and clearing."""

    @pytest.mark.asyncio
    async def test_remove_document(self, engine):
        """Test removal from store and both indexes."""
        keep = await engine.add_document("Advanced caching strategies")
        drop = await engine.add_document("PostgreSQL database with Prisma ORM")
        terms_before = engine.stats().indexed_term_count

        assert engine.remove_document(drop) is True
        assert engine.get_document(drop) is None
        assert engine.stats().document_count == 1
        assert engine.stats().indexed_term_count < terms_before
        assert all(r.id != drop for r in await engine.search("PostgreSQL database"))
        assert engine.get_document(keep) is not None

    def test_remove_unknown(self, engine):
        """Test removing an unknown id."""
        assert engine.remove_document("missing") is False

    @pytest.mark.asyncio
    async def test_clear(self, sample_engine):
        """Test clearing every document."""
        sample_engine.clear()
        stats = sample_engine.stats()
        assert stats.document_count == 0
        assert stats.indexed_term_count == 0
        assert await sample_engine.search("database") == []


class TestStats:
    """Tests for stats()."""

    def test_empty(self, engine):
        """Test stats of an empty engine."""
        stats = engine.stats()
        assert stats.document_count == 0
        assert stats.indexed_term_count == 0
        assert stats.embedding_dimension == 384
        assert stats.storage_size_bytes == 0

    @pytest.mark.asyncio
    async def test_idempotent(self, sample_engine):
        """Test stats without intervening mutation are identical."""
        assert sample_engine.stats() == sample_engine.stats()

    @pytest.mark.asyncio
    async def test_counts(self, engine):
        """Test term counting and storage estimate."""
        await engine.add_document("cache the cache")
        stats = engine.stats()

        assert stats.document_count == 1
        assert stats.indexed_term_count == 2
        assert stats.storage_size_bytes == 384 * 8

    @pytest.mark.asyncio
    async def test_stats_unchanged_by_search(self, sample_engine):
        """Test that searching does not mutate the indexes."""
        before = sample_engine.stats()
        await sample_engine.search("database caching")
        assert sample_engine.stats() == before


class TestConcurrency:
    """Tests for interleaved ingestion and search."""

    @pytest.mark.asyncio
    async def test_interleaved_ingest_and_search(self, engine):
        """Test that searches during ingestion see consistent indexes."""
        texts = [f"document number {i} about caching" for i in range(20)]

        async def ingest():
            for text in texts:
                await engine.add_document(text)

        async def search():
            for _ in range(20):
                for result in await engine.search("caching"):
                    assert engine.get_document(result.id) is not None
                await asyncio.sleep(0)

        await asyncio.gather(ingest(), search())

        assert engine.stats().document_count == 20
        assert len(await engine.search("caching", SearchOptions(top_k=50))) == 20
