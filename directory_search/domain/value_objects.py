"""Domain value objects used by the search and ranking engine."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional, Tuple

_TENANT_ID_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]{0,127}$")


@dataclass(frozen=True)
class TenantId:
    """Opaque tenant identifier used for multi-tenant isolation.

    Tenant ids end up inside cache keys and cache-clear patterns, so the
    character set excludes the key separator and glob metacharacters.
    """

    value: str

    def __init__(self, value: Any):
        if isinstance(value, TenantId):
            value = value.value
        if not isinstance(value, str):
            value = str(value)
        if not _TENANT_ID_PATTERN.match(value):
            raise ValueError(f"Invalid tenant_id: {value!r}")
        object.__setattr__(self, "value", value)

    def __str__(self) -> str:
        return self.value


class MatchType(str, Enum):
    """Classification of how a query term matched a field."""

    EXACT = "exact"
    FUZZY = "fuzzy"
    PARTIAL = "partial"
    NONE = "none"

    @property
    def precedence(self) -> int:
        return _MATCH_PRECEDENCE[self]


_MATCH_PRECEDENCE = {
    MatchType.EXACT: 3,
    MatchType.FUZZY: 2,
    MatchType.PARTIAL: 1,
    MatchType.NONE: 0,
}


@dataclass(frozen=True)
class RankingWeights:
    """Multipliers applied to each match classification when scoring."""

    exact_match: float = 1.0
    fuzzy_match: float = 0.7
    partial_match: float = 0.4

    def __post_init__(self):
        for name in ("exact_match", "fuzzy_match", "partial_match"):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or math.isnan(value) or math.isinf(value):
                raise ValueError(f"{name} must be a finite number")
            if value < 0:
                raise ValueError(f"{name} must be non-negative")

    def weight_for(self, match_type: MatchType) -> float:
        if match_type == MatchType.EXACT:
            return self.exact_match
        if match_type == MatchType.FUZZY:
            return self.fuzzy_match
        if match_type == MatchType.PARTIAL:
            return self.partial_match
        return 0.0

    def to_dict(self) -> Dict[str, float]:
        return {
            "exactMatch": self.exact_match,
            "fuzzyMatch": self.fuzzy_match,
            "partialMatch": self.partial_match,
        }


@dataclass(frozen=True)
class SearchFilters:
    """Optional narrowing applied to the tenant's employee set before matching."""

    department: Optional[str] = None
    title: Optional[str] = None
    skills: FrozenSet[str] = field(default_factory=frozenset)
    include_inactive: bool = False

    def matches(self, employee: Any) -> bool:
        """Check whether an employee projection passes every filter.

        Department is a case-insensitive equality, title a case-insensitive
        substring and skills require every requested skill to be present.
        """
        if not self.include_inactive and not employee.is_active:
            return False

        if self.department:
            if (employee.department or "").lower() != self.department.lower():
                return False

        if self.title:
            if self.title.lower() not in (employee.title or "").lower():
                return False

        if self.skills:
            employee_skills = {skill.lower() for skill in employee.skills}
            if not all(skill.lower() in employee_skills for skill in self.skills):
                return False

        return True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "department": self.department,
            "title": self.title,
            "skills": sorted(self.skills),
            "includeInactive": self.include_inactive,
        }


@dataclass(frozen=True)
class Pagination:
    """1-based page number and page size."""

    page: int = 1
    page_size: int = 20

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


@dataclass(frozen=True)
class MatchOptions:
    """Matching knobs validated and defaulted at the request boundary."""

    fuzzy_threshold: float = 0.3
    ranking_weights: RankingWeights = field(default_factory=RankingWeights)

    def __post_init__(self):
        if not 0.0 <= self.fuzzy_threshold <= 1.0:
            raise ValueError("fuzzy_threshold must be between 0 and 1")


@dataclass(frozen=True)
class SearchRequest:
    """Canonical search request produced by the request normalizer."""

    tenant_id: TenantId
    query_text: str
    filters: SearchFilters = field(default_factory=SearchFilters)
    pagination: Pagination = field(default_factory=Pagination)
    options: MatchOptions = field(default_factory=MatchOptions)

    @property
    def normalized_query(self) -> str:
        """Lower-cased query with collapsed whitespace."""
        return " ".join(self.query_text.split()).lower()

    @property
    def terms(self) -> Tuple[str, ...]:
        return tuple(self.normalized_query.split())

    @property
    def is_empty(self) -> bool:
        return not self.normalized_query


class AutocompleteType(str, Enum):
    """Field groups that autocomplete can draw values from."""

    NAMES = "names"
    TITLES = "titles"
    DEPARTMENTS = "departments"
    SKILLS = "skills"
    ALL = "all"


__all__ = [
    "TenantId",
    "MatchType",
    "RankingWeights",
    "SearchFilters",
    "Pagination",
    "MatchOptions",
    "SearchRequest",
    "AutocompleteType",
]
