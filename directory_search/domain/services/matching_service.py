"""Domain service evaluating employees against a free-text query."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from directory_search.domain.entities.employee import EmployeeProjection
from directory_search.domain.entities.search_result import MatchResult
from directory_search.domain.services.text_similarity import similarity
from directory_search.domain.value_objects import MatchOptions, MatchType

SEARCHABLE_FIELDS: Tuple[str, ...] = (
    "firstName",
    "lastName",
    "email",
    "title",
    "department",
    "skills",
)

EXACT_FIELD_SCORE = 1.0
PARTIAL_FIELD_SCORE = 0.6

# A field value found inside the query term also counts as partial, but only
# for short terms and non-trivial values.
REVERSE_PARTIAL_MAX_TERM_LENGTH = 20
REVERSE_PARTIAL_MIN_VALUE_LENGTH = 3


@dataclass(frozen=True)
class FieldMatch:
    """Best classification of one query term against one field."""

    match_type: MatchType
    score: float
    weighted_score: float

    @classmethod
    def none(cls) -> "FieldMatch":
        return cls(MatchType.NONE, 0.0, 0.0)

    def beats(self, other: "FieldMatch") -> bool:
        if self.weighted_score != other.weighted_score:
            return self.weighted_score > other.weighted_score
        return self.match_type.precedence > other.match_type.precedence


def field_values(employee: EmployeeProjection, field_name: str) -> List[str]:
    """Raw values of a searchable field; skills yield one value per skill."""
    if field_name == "firstName":
        return [employee.first_name]
    if field_name == "lastName":
        return [employee.last_name]
    if field_name == "email":
        return [employee.email]
    if field_name == "title":
        return [employee.title] if employee.title else []
    if field_name == "department":
        return [employee.department] if employee.department else []
    if field_name == "skills":
        return list(employee.skills)
    raise ValueError(f"Unknown searchable field: {field_name}")


class MatchingService:
    """
    Classifies how a query matches each searchable field of an employee.

    Each query term is compared with every field value:
    - exact: case-insensitive equality
    - partial: the term is a substring of the value (or a short term
      contains the value)
    - fuzzy: normalized Levenshtein similarity against the value or any of
      its words reaches the fuzzy threshold

    When more than one classification applies, the one with the highest
    weighted score wins. Terms are ANDed: every term must match at least
    one field for the employee to be a candidate. A multi-word query equal
    to a whole field value is an exact match on that field.
    """

    def __init__(self, fields: Sequence[str] = SEARCHABLE_FIELDS):
        self.fields = tuple(fields)

    def classify(self, term: str, value: Optional[str], options: MatchOptions) -> FieldMatch:
        """Classify a single lower-cased term against a single field value."""
        if not value:
            return FieldMatch.none()

        normalized = " ".join(value.split()).lower()
        if not normalized or not term:
            return FieldMatch.none()

        weights = options.ranking_weights

        if term == normalized:
            return FieldMatch(
                MatchType.EXACT,
                EXACT_FIELD_SCORE,
                weights.weight_for(MatchType.EXACT) * EXACT_FIELD_SCORE,
            )

        best = FieldMatch.none()

        if term in normalized or (
            len(term) <= REVERSE_PARTIAL_MAX_TERM_LENGTH
            and len(normalized) >= REVERSE_PARTIAL_MIN_VALUE_LENGTH
            and normalized in term
        ):
            best = FieldMatch(
                MatchType.PARTIAL,
                PARTIAL_FIELD_SCORE,
                weights.weight_for(MatchType.PARTIAL) * PARTIAL_FIELD_SCORE,
            )

        fuzzy_score = self._fuzzy_similarity(term, normalized)
        if fuzzy_score >= options.fuzzy_threshold:
            candidate = FieldMatch(
                MatchType.FUZZY,
                fuzzy_score,
                weights.weight_for(MatchType.FUZZY) * fuzzy_score,
            )
            if candidate.beats(best):
                best = candidate

        return best

    def evaluate(
        self,
        employee: EmployeeProjection,
        terms: Sequence[str],
        options: MatchOptions,
    ) -> MatchResult:
        """Evaluate every term against every field of one employee."""
        if not terms:
            return MatchResult(employee_id=employee.id, match_type=MatchType.NONE)

        best_per_field: Dict[str, FieldMatch] = {}

        if len(terms) > 1:
            self._match_whole_phrase(employee, " ".join(terms), options, best_per_field)

        for term in terms:
            term_matched = False
            for field_name in self.fields:
                field_best = FieldMatch.none()
                for value in field_values(employee, field_name):
                    candidate = self.classify(term, value, options)
                    if candidate.beats(field_best):
                        field_best = candidate

                if field_best.match_type == MatchType.NONE:
                    continue

                term_matched = True
                current = best_per_field.get(field_name)
                if current is None or field_best.beats(current):
                    best_per_field[field_name] = field_best

            if not term_matched:
                return MatchResult(employee_id=employee.id, match_type=MatchType.NONE)

        best_type = max(
            (match.match_type for match in best_per_field.values()),
            key=lambda match_type: match_type.precedence,
        )

        return MatchResult(
            employee_id=employee.id,
            match_type=best_type,
            matched_fields=frozenset(best_per_field),
            field_scores={name: match.score for name, match in best_per_field.items()},
            field_match_types={name: match.match_type for name, match in best_per_field.items()},
        )

    def match_all(
        self,
        employees: Iterable[EmployeeProjection],
        terms: Sequence[str],
        options: MatchOptions,
    ) -> List[Tuple[EmployeeProjection, MatchResult]]:
        """Return ``(employee, match)`` pairs for every matching employee."""
        matches = []
        for employee in employees:
            result = self.evaluate(employee, terms, options)
            if result.is_match:
                matches.append((employee, result))
        return matches

    def _match_whole_phrase(
        self,
        employee: EmployeeProjection,
        phrase: str,
        options: MatchOptions,
        best_per_field: Dict[str, FieldMatch],
    ) -> None:
        """Record exact hits of a multi-word query against whole field values."""
        for field_name in self.fields:
            for value in field_values(employee, field_name):
                candidate = self.classify(phrase, value, options)
                if candidate.match_type == MatchType.EXACT:
                    best_per_field[field_name] = candidate
                    break

    @staticmethod
    def _fuzzy_similarity(term: str, normalized_value: str) -> float:
        candidates = {normalized_value}
        if "@" not in normalized_value:
            candidates.update(normalized_value.split())
        return max(similarity(term, candidate) for candidate in candidates)
