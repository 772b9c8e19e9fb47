"""Domain entities for the directory search engine."""

from .employee import EmployeeProjection
from .search_result import MatchResult, RankedEntry, SearchResult

__all__ = [
    "EmployeeProjection",
    "MatchResult",
    "RankedEntry",
    "SearchResult",
]
