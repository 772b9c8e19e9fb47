"""Domain service converting match classifications into ranked, paginated entries."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

from directory_search.domain.entities.employee import EmployeeProjection
from directory_search.domain.entities.search_result import MatchResult, RankedEntry
from directory_search.domain.value_objects import Pagination, RankingWeights

MULTI_FIELD_BOOST = 0.05
MAX_MULTI_FIELD_BOOST = 0.15
SCORE_PRECISION = 6


@dataclass(frozen=True)
class RankedPage:
    """One page of ranked entries together with the pre-pagination total."""

    entries: Tuple[RankedEntry, ...]
    total: int
    has_more: bool


class RankingService:
    """Scores, orders and paginates matched candidates."""

    def score(self, match: MatchResult, weights: RankingWeights) -> float:
        """Best weighted field score plus a capped boost for extra matched fields."""
        if not match.is_match:
            return 0.0

        base = max(
            weights.weight_for(match.field_match_types[field_name]) * field_score
            for field_name, field_score in match.field_scores.items()
        )
        extra_fields = len(match.matched_fields) - 1
        boost = min(MULTI_FIELD_BOOST * extra_fields, MAX_MULTI_FIELD_BOOST) if extra_fields > 0 else 0.0
        return round(base + boost, SCORE_PRECISION)

    def rank(
        self,
        matches: Iterable[Tuple[EmployeeProjection, MatchResult]],
        weights: RankingWeights,
    ) -> List[RankedEntry]:
        """Build entries sorted by score, then last name, first name and id."""
        entries = [
            RankedEntry(
                employee=employee,
                score=self.score(match, weights),
                match_type=match.match_type,
                matched_fields=tuple(sorted(match.matched_fields)),
            )
            for employee, match in matches
        ]
        entries.sort(key=RankedEntry.sort_key)
        return entries

    def paginate(self, entries: Sequence[RankedEntry], pagination: Pagination) -> RankedPage:
        """Slice a fully sorted sequence so ordering is stable across pages."""
        total = len(entries)
        start = pagination.offset
        end = start + pagination.page_size
        return RankedPage(
            entries=tuple(entries[start:end]),
            total=total,
            has_more=end < total,
        )
