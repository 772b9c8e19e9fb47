"""Turns raw query parameters into a canonical SearchRequest."""

from __future__ import annotations

import math
from typing import Any, Dict, FrozenSet, Mapping, Optional

from directory_search.domain.exceptions import ValidationError
from directory_search.domain.value_objects import (
    MatchOptions,
    Pagination,
    RankingWeights,
    SearchFilters,
    SearchRequest,
    TenantId,
)

TRUTHY_VALUES = frozenset({"true", "1", "yes"})

WEIGHT_PARAMETERS = {
    "exactWeight": "exact_match",
    "fuzzyWeight": "fuzzy_match",
    "partialWeight": "partial_match",
}


def _first(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _is_truthy(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in TRUTHY_VALUES


def _parse_number(value: Any, field: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a number", field=field)
    if math.isnan(number) or math.isinf(number):
        raise ValidationError(f"{field} must be a finite number", field=field)
    return number


def _parse_int(value: Any, field: str) -> int:
    if isinstance(value, str):
        value = value.strip()
        try:
            return int(value)
        except ValueError:
            pass
    return int(_parse_number(value, field))


class SearchRequestNormalizer:
    """
    Validates and defaults raw search parameters.

    Pagination and the fuzzy threshold are clamped rather than rejected.
    Values that cannot be parsed at all raise ``ValidationError``.
    """

    def __init__(
        self,
        default_page_size: int = 20,
        max_page_size: int = 100,
        max_query_length: int = 100,
    ):
        self.default_page_size = default_page_size
        self.max_page_size = max_page_size
        self.max_query_length = max_query_length

    def query_text(self, params: Mapping[str, Any]) -> str:
        """Whitespace-collapsed query from ``q`` or ``query``, truncated to the maximum length."""
        raw = _first(params.get("q"))
        if _is_blank(raw):
            raw = _first(params.get("query"))
        if _is_blank(raw):
            return ""
        collapsed = " ".join(str(raw).split())
        return collapsed[: self.max_query_length].strip()

    def normalize(self, tenant_id: TenantId, params: Mapping[str, Any]) -> SearchRequest:
        return SearchRequest(
            tenant_id=TenantId(tenant_id),
            query_text=self.query_text(params),
            filters=self._filters(params),
            pagination=self._pagination(params),
            options=self._options(params),
        )

    def _filters(self, params: Mapping[str, Any]) -> SearchFilters:
        department = _first(params.get("department"))
        title = _first(params.get("title"))
        return SearchFilters(
            department=None if _is_blank(department) else str(department).strip(),
            title=None if _is_blank(title) else str(title).strip(),
            skills=self._skills(params.get("skills")),
            include_inactive=_is_truthy(_first(params.get("includeInactive"))),
        )

    @staticmethod
    def _skills(raw: Any) -> FrozenSet[str]:
        if raw is None:
            return frozenset()
        parts = raw if isinstance(raw, (list, tuple)) else [raw]

        # Duplicates differing only in case collapse to the first spelling.
        skills: Dict[str, str] = {}
        for part in parts:
            for skill in str(part).split(","):
                skill = skill.strip()
                if skill and skill.lower() not in skills:
                    skills[skill.lower()] = skill
        return frozenset(skills.values())

    def _pagination(self, params: Mapping[str, Any]) -> Pagination:
        raw_page = _first(params.get("page"))
        raw_page_size = _first(params.get("pageSize"))

        page = 1 if _is_blank(raw_page) else _parse_int(raw_page, "page")
        page_size = (
            self.default_page_size
            if _is_blank(raw_page_size)
            else _parse_int(raw_page_size, "pageSize")
        )

        return Pagination(
            page=max(1, page),
            page_size=max(1, min(self.max_page_size, page_size)),
        )

    def _options(self, params: Mapping[str, Any]) -> MatchOptions:
        raw_threshold = _first(params.get("fuzzyThreshold"))
        if _is_blank(raw_threshold):
            threshold = MatchOptions().fuzzy_threshold
        else:
            threshold = max(0.0, min(1.0, _parse_number(raw_threshold, "fuzzyThreshold")))

        return MatchOptions(
            fuzzy_threshold=threshold,
            ranking_weights=self._weights(params),
        )

    @staticmethod
    def _weights(params: Mapping[str, Any]) -> RankingWeights:
        supplied: Dict[str, Optional[Any]] = {
            parameter: _first(params.get(parameter)) for parameter in WEIGHT_PARAMETERS
        }
        use_custom = _is_truthy(_first(params.get("customWeights"))) or any(
            not _is_blank(value) for value in supplied.values()
        )
        if not use_custom:
            return RankingWeights()

        overrides: Dict[str, float] = {}
        for parameter, attribute in WEIGHT_PARAMETERS.items():
            value = supplied[parameter]
            if _is_blank(value):
                continue
            weight = _parse_number(value, parameter)
            if weight < 0:
                raise ValidationError(f"{parameter} must not be negative", field=parameter)
            overrides[attribute] = weight

        return RankingWeights(**overrides)
