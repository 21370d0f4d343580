"""
Hybrid Retrieval Engine - Metadata Filters

Applied in the filtering stage of a search, after reranking and before
truncation. A filter dict maps a metadata key to either a value (equality)
or a list/tuple/set of accepted values (membership); all keys must match.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional

from hybrid_retrieval.core.exceptions import ValidationError


class FilterOperator(str, Enum):
    """Filter comparison operators."""
    EQ = "eq"           # Equal
    IN = "in"           # In list


@dataclass
class FilterCondition:
    """A single filter condition."""
    field: str
    operator: FilterOperator
    value: Any

    def matches(self, metadata: Mapping[str, Any]) -> bool:
        """Check if metadata matches this condition."""
        if self.field not in metadata:
            return False

        field_value = metadata[self.field]
        if self.operator == FilterOperator.IN:
            return field_value in self.value
        return field_value == self.value


@dataclass
class MetadataFilter:
    """
    Conjunction of metadata conditions.

    Example:
        f = MetadataFilter.from_dict({"source": "documentation", "index": [1, 2]})
        f.matches({"source": "documentation", "index": 2})  # True
    """
    conditions: list[FilterCondition] = field(default_factory=list)

    @classmethod
    def from_dict(cls, filters: Optional[Mapping[str, Any]]) -> "MetadataFilter":
        """Build a filter from a key -> value-or-values mapping."""
        if filters is None:
            return cls()
        if not isinstance(filters, Mapping):
            raise ValidationError("Filters must be a mapping", field="filters")

        conditions = []
        for key, value in filters.items():
            if isinstance(value, (list, tuple, set, frozenset)):
                conditions.append(FilterCondition(str(key), FilterOperator.IN, list(value)))
            else:
                conditions.append(FilterCondition(str(key), FilterOperator.EQ, value))
        return cls(conditions=conditions)

    def matches(self, metadata: Mapping[str, Any]) -> bool:
        """True when every condition matches (an empty filter matches everything)."""
        return all(condition.matches(metadata) for condition in self.conditions)

    def __bool__(self) -> bool:
        return bool(self.conditions)
