"""Domain service proposing "did you mean" alternatives for a query."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Tuple

from directory_search.domain.entities.employee import EmployeeProjection
from directory_search.domain.services.text_similarity import similarity

SUGGESTION_THRESHOLD = 0.5
MAX_SUGGESTIONS = 5
SUGGESTION_FIELDS = ("first_name", "last_name", "title", "department")


class SuggestionService:
    """Fuzzy-matches a query against distinct corpus values of a tenant."""

    def __init__(self, threshold: float = SUGGESTION_THRESHOLD, max_suggestions: int = MAX_SUGGESTIONS):
        self.threshold = threshold
        self.max_suggestions = max_suggestions

    def build_corpus(self, employees: Iterable[EmployeeProjection]) -> Dict[str, str]:
        """Map lower-cased value to a display form.

        The alphabetically smallest spelling wins when the same value appears
        with different casing, so the corpus does not depend on input order.
        """
        corpus: Dict[str, str] = {}
        for employee in employees:
            for attribute in SUGGESTION_FIELDS:
                value = getattr(employee, attribute)
                if not value or not value.strip():
                    continue
                display = value.strip()
                key = display.lower()
                current = corpus.get(key)
                if current is None or display < current:
                    corpus[key] = display
        return corpus

    def suggest(
        self,
        query: str,
        employees: Iterable[EmployeeProjection],
        limit: Optional[int] = None,
    ) -> List[str]:
        """Return up to ``limit`` suggestions ordered by similarity then alphabetically."""
        if limit is None:
            limit = self.max_suggestions
        normalized = " ".join(query.split()).lower()
        if not normalized:
            return []

        scored: List[Tuple[float, str, str]] = []
        for key, display in self.build_corpus(employees).items():
            if key == normalized:
                continue
            score = similarity(normalized, key)
            if score >= self.threshold:
                scored.append((score, key, display))

        scored.sort(key=lambda item: (-item[0], item[1], item[2]))
        return [display for _, _, display in scored[:limit]]
