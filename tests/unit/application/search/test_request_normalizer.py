"""Unit tests for SearchRequestNormalizer."""

import pytest

from directory_search.application.search.request_normalizer import SearchRequestNormalizer
from directory_search.domain.exceptions import ValidationError
from directory_search.domain.value_objects import RankingWeights


@pytest.fixture
def normalizer():
    return SearchRequestNormalizer()


class TestQueryText:

    def test_q_preferred_over_query(self, normalizer):
        assert normalizer.query_text({"q": "john", "query": "jane"}) == "john"

    def test_query_used_when_q_blank(self, normalizer):
        assert normalizer.query_text({"q": "  ", "query": "jane"}) == "jane"

    def test_whitespace_collapsed(self, normalizer):
        assert normalizer.query_text({"q": "  john \t  doe "}) == "john doe"

    def test_truncated_to_max_length(self):
        normalizer = SearchRequestNormalizer(max_query_length=5)
        assert normalizer.query_text({"q": "abcdefgh"}) == "abcde"

    def test_missing_query_is_empty(self, normalizer):
        assert normalizer.query_text({}) == ""


class TestFilters:

    def test_skills_split_and_deduplicated(self, normalizer, tenant_id):
        request = normalizer.normalize(tenant_id, {"q": "x", "skills": "Python, python ,Go,,"})
        assert {skill.lower() for skill in request.filters.skills} == {"python", "go"}
        assert len(request.filters.skills) == 2

    def test_repeated_skills_parameter(self, normalizer, tenant_id):
        request = normalizer.normalize(tenant_id, {"q": "x", "skills": ["Python", "Go"]})
        assert request.filters.skills == frozenset({"Python", "Go"})

    @pytest.mark.parametrize("raw, expected", [("true", True), ("1", True), ("YES", True), ("false", False), ("", False)])
    def test_include_inactive(self, normalizer, tenant_id, raw, expected):
        request = normalizer.normalize(tenant_id, {"q": "x", "includeInactive": raw})
        assert request.filters.include_inactive is expected

    def test_blank_department_ignored(self, normalizer, tenant_id):
        request = normalizer.normalize(tenant_id, {"q": "x", "department": "  ", "title": " Lead "})
        assert request.filters.department is None
        assert request.filters.title == "Lead"


class TestPagination:

    def test_defaults(self, normalizer, tenant_id):
        request = normalizer.normalize(tenant_id, {"q": "x"})
        assert request.pagination.page == 1
        assert request.pagination.page_size == 20

    @pytest.mark.parametrize(
        "params, page, page_size",
        [
            ({"page": "0"}, 1, 20),
            ({"page": "-4"}, 1, 20),
            ({"pageSize": "500"}, 1, 100),
            ({"pageSize": "0"}, 1, 1),
            ({"page": "2.7", "pageSize": "10"}, 2, 10),
        ],
    )
    def test_out_of_range_values_are_clamped(self, normalizer, tenant_id, params, page, page_size):
        request = normalizer.normalize(tenant_id, {"q": "x", **params})
        assert request.pagination.page == page
        assert request.pagination.page_size == page_size

    @pytest.mark.parametrize("field, value", [("page", "abc"), ("pageSize", "ten"), ("page", "nan")])
    def test_non_numeric_values_rejected(self, normalizer, tenant_id, field, value):
        with pytest.raises(ValidationError) as exc_info:
            normalizer.normalize(tenant_id, {"q": "x", field: value})
        assert exc_info.value.field == field


class TestMatchOptions:

    def test_default_threshold(self, normalizer, tenant_id):
        assert normalizer.normalize(tenant_id, {"q": "x"}).options.fuzzy_threshold == 0.3

    @pytest.mark.parametrize("raw, expected", [("0.5", 0.5), ("-1", 0.0), ("7", 1.0)])
    def test_threshold_clamped(self, normalizer, tenant_id, raw, expected):
        request = normalizer.normalize(tenant_id, {"q": "x", "fuzzyThreshold": raw})
        assert request.options.fuzzy_threshold == expected

    def test_threshold_must_be_numeric(self, normalizer, tenant_id):
        with pytest.raises(ValidationError):
            normalizer.normalize(tenant_id, {"q": "x", "fuzzyThreshold": "loose"})

    def test_default_weights_without_overrides(self, normalizer, tenant_id):
        request = normalizer.normalize(tenant_id, {"q": "x", "customWeights": "false"})
        assert request.options.ranking_weights == RankingWeights()

    def test_partial_weight_override(self, normalizer, tenant_id):
        request = normalizer.normalize(tenant_id, {"q": "x", "customWeights": "true", "partialWeight": "0.9"})
        assert request.options.ranking_weights == RankingWeights(partial_match=0.9)

    def test_weight_given_without_flag_still_applies(self, normalizer, tenant_id):
        request = normalizer.normalize(tenant_id, {"q": "x", "exactWeight": "2"})
        assert request.options.ranking_weights.exact_match == 2.0

    def test_non_numeric_weight_rejected(self, normalizer, tenant_id):
        with pytest.raises(ValidationError) as exc_info:
            normalizer.normalize(tenant_id, {"q": "x", "fuzzyWeight": "heavy"})
        assert exc_info.value.field == "fuzzyWeight"

    def test_negative_weight_rejected(self, normalizer, tenant_id):
        with pytest.raises(ValidationError):
            normalizer.normalize(tenant_id, {"q": "x", "exactWeight": "-0.1"})
