"""Search result entities produced by the matching and ranking engines."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Tuple

from directory_search.domain.entities.employee import EmployeeProjection
from directory_search.domain.value_objects import MatchType


@dataclass(frozen=True)
class MatchResult:
    """Per-candidate outcome of evaluating the query against every field."""

    employee_id: str
    match_type: MatchType
    matched_fields: FrozenSet[str] = field(default_factory=frozenset)
    field_scores: Mapping[str, float] = field(default_factory=dict)
    field_match_types: Mapping[str, MatchType] = field(default_factory=dict)

    @property
    def is_match(self) -> bool:
        return self.match_type != MatchType.NONE


@dataclass(frozen=True)
class RankedEntry:
    """A matched employee with its final score."""

    employee: EmployeeProjection
    score: float
    match_type: MatchType
    matched_fields: Tuple[str, ...] = ()

    def sort_key(self) -> Tuple[float, str, str, str]:
        """Score descending, then last name, first name and id ascending."""
        return (
            -self.score,
            self.employee.last_name.lower(),
            self.employee.first_name.lower(),
            self.employee.id,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "employee": self.employee.to_dict(),
            "score": self.score,
            "matchType": self.match_type.value,
            "matchedFields": list(self.matched_fields),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RankedEntry":
        return cls(
            employee=EmployeeProjection.from_dict(data["employee"]),
            score=float(data["score"]),
            match_type=MatchType(data["matchType"]),
            matched_fields=tuple(data.get("matchedFields") or ()),
        )


@dataclass(frozen=True)
class SearchResult:
    """Assembled search response, also the value stored in the result cache."""

    results: Tuple[RankedEntry, ...]
    total: int
    page: int
    page_size: int
    has_more: bool
    query: str
    execution_time_ms: float
    suggestions: Tuple[str, ...] = ()
    cached: bool = False

    @classmethod
    def empty(cls, query: str, page: int, page_size: int, execution_time_ms: float = 0.0) -> "SearchResult":
        return cls(
            results=(),
            total=0,
            page=page,
            page_size=page_size,
            has_more=False,
            query=query,
            execution_time_ms=execution_time_ms,
        )

    @property
    def match_types(self) -> List[str]:
        """Distinct match types present on this page, in order of appearance."""
        seen: List[str] = []
        for entry in self.results:
            if entry.match_type.value not in seen:
                seen.append(entry.match_type.value)
        return seen

    def with_timing(self, execution_time_ms: float, cached: Optional[bool] = None) -> "SearchResult":
        return replace(
            self,
            execution_time_ms=execution_time_ms,
            cached=self.cached if cached is None else cached,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "results": [entry.to_dict() for entry in self.results],
            "total": self.total,
            "page": self.page,
            "pageSize": self.page_size,
            "hasMore": self.has_more,
            "query": self.query,
            "executionTime": self.execution_time_ms,
            "suggestions": list(self.suggestions),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SearchResult":
        return cls(
            results=tuple(RankedEntry.from_dict(item) for item in data.get("results") or ()),
            total=int(data["total"]),
            page=int(data["page"]),
            page_size=int(data["pageSize"]),
            has_more=bool(data["hasMore"]),
            query=data.get("query") or "",
            execution_time_ms=float(data.get("executionTime") or 0.0),
            suggestions=tuple(data.get("suggestions") or ()),
        )
