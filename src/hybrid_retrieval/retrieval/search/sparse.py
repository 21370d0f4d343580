"""
Hybrid Retrieval Engine - Sparse (Lexical) Search

In-memory inverted index mapping normalized terms to the ids of the
documents containing them. Candidates are scored by query term coverage:

    score = min(1, matched distinct query terms / distinct query terms)

Counting distinct terms rather than occurrences keeps keyword-stuffed
documents from outranking documents that cover more of the query.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from hybrid_retrieval.core.logging import LoggerMixin

MIN_TERM_LENGTH = 3

_TOKEN_RE = re.compile(r"\b\w+\b")


def tokenize(text: str) -> list[str]:
    """Lowercase word-boundary tokens, dropping tokens of two characters or fewer."""
    return [
        token
        for token in _TOKEN_RE.findall((text or "").lower())
        if len(token) >= MIN_TERM_LENGTH
    ]


def distinct_terms(text: str) -> list[str]:
    """Distinct normalized terms of a text, in first-occurrence order."""
    return list(dict.fromkeys(tokenize(text)))


@dataclass
class LexicalCandidate:
    """Document matched by at least one query term."""
    id: str
    score: float
    match_count: int
    matched_terms: list[str] = field(default_factory=list)


class LexicalIndex(LoggerMixin):
    """
    Inverted index over normalized document terms.

    A term has a posting only while at least one indexed document contains
    it. Each document's term set is kept so removal can repair every posting
    without re-reading the text, and so rerankers can reuse it.
    """

    def __init__(self) -> None:
        # Inverted index: term -> {doc_id, ...}
        self._postings: dict[str, set[str]] = {}
        self._doc_terms: dict[str, frozenset[str]] = {}

    def index(self, doc_id: str, text: str) -> frozenset[str]:
        """Add a document's distinct terms to the index, replacing any previous entry."""
        if doc_id in self._doc_terms:
            self.remove(doc_id)

        terms = frozenset(tokenize(text))
        self._doc_terms[doc_id] = terms
        for term in terms:
            self._postings.setdefault(term, set()).add(doc_id)

        return terms

    def remove(self, doc_id: str) -> bool:
        """Remove a document from every posting it appears in."""
        terms = self._doc_terms.pop(doc_id, None)
        if terms is None:
            return False

        for term in terms:
            posting = self._postings.get(term)
            if posting is None:
                continue
            posting.discard(doc_id)
            if not posting:
                del self._postings[term]

        return True

    def search(self, query: str) -> list[LexicalCandidate]:
        """
        Find documents sharing terms with the query.

        Returns candidates sorted by score descending, then id. A query with
        no recognized terms returns an empty list.
        """
        query_terms = distinct_terms(query)
        if not query_terms:
            return []

        matches: dict[str, list[str]] = {}
        for term in query_terms:
            for doc_id in self._postings.get(term, ()):
                matches.setdefault(doc_id, []).append(term)

        total_terms = len(query_terms)
        candidates = [
            LexicalCandidate(
                id=doc_id,
                score=min(1.0, len(terms) / total_terms),
                match_count=len(terms),
                matched_terms=terms,
            )
            for doc_id, terms in matches.items()
        ]
        candidates.sort(key=lambda c: (-c.score, c.id))

        self.logger.debug(
            "Lexical search completed",
            query_terms=total_terms,
            candidates=len(candidates),
        )

        return candidates

    def terms_for(self, doc_id: str) -> frozenset[str]:
        """Normalized term set of an indexed document (empty if unknown)."""
        return self._doc_terms.get(doc_id, frozenset())

    def postings(self, term: str) -> frozenset[str]:
        """Ids of the documents containing a normalized term."""
        return frozenset(self._postings.get(term, ()))

    @property
    def term_count(self) -> int:
        """Number of distinct terms with a non-empty posting."""
        return len(self._postings)

    def clear(self) -> None:
        """Clear the entire index."""
        self._postings.clear()
        self._doc_terms.clear()

    def __contains__(self, doc_id: object) -> bool:
        return doc_id in self._doc_terms

    def __len__(self) -> int:
        return len(self._doc_terms)
