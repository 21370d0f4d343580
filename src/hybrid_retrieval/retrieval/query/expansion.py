"""
Hybrid Retrieval Engine - Query Expansion
"""

from __future__ import annotations

import re
from typing import Mapping, Optional, Sequence

from hybrid_retrieval.core.exceptions import ConfigurationError
from hybrid_retrieval.core.logging import LoggerMixin

_WORD_RE = re.compile(r"\b\w+\b")

DEFAULT_SYNONYMS: dict[str, list[str]] = {
    "ai": ["artificial intelligence", "machine learning"],
    "ml": ["machine learning", "deep learning"],
    "api": ["application programming interface", "endpoint"],
    "auth": ["authentication", "authorization"],
    "db": ["database", "data store"],
    "cache": ["caching", "memory store"],
    "real": ["real-time", "live", "instant"],
}


class QueryExpander(LoggerMixin):
    """
    Expands short domain terms in a query with their synonym phrases.

    The original query text is always kept verbatim at the front; synonym
    phrases are only appended, so exact matches on the original wording are
    never weakened.

    Keys match whole lower-cased words of the query. This deliberately differs
    from a plain substring test: "ai" does not fire on "maintain" or "email",
    and "API" in upper case still fires the "api" entry.
    """

    def __init__(
        self,
        synonyms: Optional[Mapping[str, Sequence[str]]] = None,
        extra_synonyms: Optional[Mapping[str, Sequence[str]]] = None,
    ):
        """
        Args:
            synonyms: Replaces the built-in table when given
            extra_synonyms: Merged over the table (e.g. loaded from YAML)
        """
        for name, value in (("synonyms", synonyms), ("extra_synonyms", extra_synonyms)):
            if value is not None and not isinstance(value, Mapping):
                raise ConfigurationError(f"{name} must map terms to lists of phrases")

        table = dict(DEFAULT_SYNONYMS if synonyms is None else synonyms)
        table.update(extra_synonyms or {})
        self.synonyms = self._normalize(table)

    @staticmethod
    def _normalize(table: Mapping[str, Sequence[str]]) -> dict[str, list[str]]:
        normalized: dict[str, list[str]] = {}
        for key, phrases in table.items():
            if isinstance(phrases, str) or not isinstance(phrases, Sequence):
                raise ConfigurationError(
                    f"Synonyms for '{key}' must be a list of phrases"
                )
            normalized[str(key).lower()] = [str(p) for p in phrases if str(p).strip()]
        return normalized

    def expansions_for(self, query: str) -> list[str]:
        """Synonym phrases triggered by the query, in table order, without duplicates."""
        words = set(_WORD_RE.findall((query or "").lower()))
        phrases: list[str] = []
        for key, synonyms in self.synonyms.items():
            if key in words:
                phrases.extend(p for p in synonyms if p not in phrases)
        return phrases

    def expand(self, query: str) -> str:
        """
        Expand a query with synonym phrases.

        Args:
            query: Original query

        Returns:
            The original query followed by any triggered synonym phrases,
            space-joined
        """
        phrases = self.expansions_for(query)
        if not phrases:
            return query

        expanded = " ".join([query, *phrases])

        self.logger.debug(
            "Expanded query",
            original=query,
            num_phrases=len(phrases),
        )

        return expanded
