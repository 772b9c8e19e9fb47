"""Unit tests for search value objects and result entities."""

import pytest

from directory_search.domain.entities.search_result import RankedEntry, SearchResult
from directory_search.domain.value_objects import (
    MatchOptions,
    MatchType,
    Pagination,
    RankingWeights,
    SearchFilters,
    SearchRequest,
    TenantId,
)
from tests.conftest import make_employee


class TestTenantId:

    @pytest.mark.parametrize("value", ["acme", "acme-eu", "tenant_01", "a.b", "0f3c9a"])
    def test_accepts_valid_identifiers(self, value):
        assert str(TenantId(value)) == value

    @pytest.mark.parametrize("value", ["", "acme:eu", "acme*", "-acme", "a b", "x" * 129])
    def test_rejects_separator_and_glob_characters(self, value):
        with pytest.raises(ValueError):
            TenantId(value)

    def test_wrapping_is_idempotent(self):
        assert TenantId(TenantId("acme")) == TenantId("acme")


class TestRankingWeights:

    def test_defaults(self):
        weights = RankingWeights()
        assert weights.weight_for(MatchType.EXACT) == 1.0
        assert weights.weight_for(MatchType.FUZZY) == 0.7
        assert weights.weight_for(MatchType.PARTIAL) == 0.4
        assert weights.weight_for(MatchType.NONE) == 0.0

    def test_negative_weight_rejected(self):
        with pytest.raises(ValueError):
            RankingWeights(exact_match=-1.0)

    def test_non_finite_weight_rejected(self):
        with pytest.raises(ValueError):
            RankingWeights(fuzzy_match=float("nan"))


class TestSearchFilters:

    def test_inactive_excluded_by_default(self):
        employee = make_employee("e1", "Ann", "Lee", is_active=False)
        assert not SearchFilters().matches(employee)
        assert SearchFilters(include_inactive=True).matches(employee)

    def test_department_is_case_insensitive_equality(self, john_doe):
        assert SearchFilters(department="engineering").matches(john_doe)
        assert not SearchFilters(department="engineer").matches(john_doe)

    def test_title_is_substring(self, john_doe):
        assert SearchFilters(title="engineer").matches(john_doe)

    def test_every_skill_required(self, john_doe):
        assert SearchFilters(skills=frozenset({"python"})).matches(john_doe)
        assert not SearchFilters(skills=frozenset({"python", "go"})).matches(john_doe)


class TestSearchRequest:

    def test_terms_are_lowercased_and_split(self, tenant_id):
        request = SearchRequest(tenant_id=tenant_id, query_text="  John   ENGINEER ")
        assert request.normalized_query == "john engineer"
        assert request.terms == ("john", "engineer")

    def test_empty_query(self, tenant_id):
        assert SearchRequest(tenant_id=tenant_id, query_text="   ").is_empty

    def test_pagination_offset(self):
        assert Pagination(page=3, page_size=20).offset == 40

    def test_threshold_bounds(self):
        with pytest.raises(ValueError):
            MatchOptions(fuzzy_threshold=1.5)


class TestSearchResultEntity:

    def test_dict_roundtrip_preserves_entries(self, john_doe):
        result = SearchResult(
            results=(RankedEntry(john_doe, 1.05, MatchType.EXACT, ("email", "firstName")),),
            total=1,
            page=1,
            page_size=20,
            has_more=False,
            query="john",
            execution_time_ms=3.2,
        )

        restored = SearchResult.from_dict(result.to_dict())

        assert restored == result

    def test_with_timing_marks_cached(self):
        result = SearchResult.empty(query="x", page=1, page_size=20)
        cached = result.with_timing(1.5, cached=True)

        assert cached.cached is True
        assert cached.execution_time_ms == 1.5
        assert result.cached is False

    def test_match_types_in_order_of_appearance(self, john_doe, jane_smith):
        result = SearchResult(
            results=(
                RankedEntry(john_doe, 1.0, MatchType.EXACT),
                RankedEntry(jane_smith, 0.5, MatchType.FUZZY),
            ),
            total=2,
            page=1,
            page_size=20,
            has_more=False,
            query="j",
            execution_time_ms=0.0,
        )

        assert result.match_types == ["exact", "fuzzy"]
