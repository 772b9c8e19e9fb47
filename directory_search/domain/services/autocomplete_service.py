"""Domain service for prefix autocomplete over distinct field values."""

from __future__ import annotations

from typing import Dict, Iterable, List, Tuple

from directory_search.domain.entities.employee import EmployeeProjection
from directory_search.domain.value_objects import AutocompleteType

MIN_PREFIX_LENGTH = 2
DEFAULT_LIMIT = 5
MAX_LIMIT = 10


def clamp_limit(limit: int) -> int:
    return max(1, min(MAX_LIMIT, limit))


def _values_for(employee: EmployeeProjection, autocomplete_type: AutocompleteType) -> List[str]:
    if autocomplete_type == AutocompleteType.NAMES:
        return [employee.first_name, employee.last_name]
    if autocomplete_type == AutocompleteType.TITLES:
        return [employee.title] if employee.title else []
    if autocomplete_type == AutocompleteType.DEPARTMENTS:
        return [employee.department] if employee.department else []
    if autocomplete_type == AutocompleteType.SKILLS:
        return list(employee.skills)
    values: List[str] = []
    for single_type in (
        AutocompleteType.NAMES,
        AutocompleteType.TITLES,
        AutocompleteType.DEPARTMENTS,
        AutocompleteType.SKILLS,
    ):
        values.extend(_values_for(employee, single_type))
    return values


class AutocompleteService:
    """Returns distinct values starting with a prefix, case-insensitively."""

    def complete(
        self,
        prefix: str,
        employees: Iterable[EmployeeProjection],
        autocomplete_type: AutocompleteType = AutocompleteType.ALL,
        limit: int = DEFAULT_LIMIT,
    ) -> List[str]:
        normalized_prefix = prefix.strip().lower()
        if len(normalized_prefix) < MIN_PREFIX_LENGTH:
            return []

        distinct: Dict[str, str] = {}
        for employee in employees:
            for value in _values_for(employee, autocomplete_type):
                if not value:
                    continue
                display = value.strip()
                key = display.lower()
                if not key.startswith(normalized_prefix):
                    continue
                current = distinct.get(key)
                if current is None or display < current:
                    distinct[key] = display

        ordered: List[Tuple[str, str]] = sorted(distinct.items())
        return [display for _, display in ordered[: clamp_limit(limit)]]
