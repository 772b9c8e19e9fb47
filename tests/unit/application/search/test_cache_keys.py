"""Unit tests for tenant-qualified search cache keys."""

import base64
import json

from hypothesis import assume, given, strategies as st

from directory_search.application.search.cache_keys import (
    build_search_cache_key,
    tenant_cache_pattern,
)
from directory_search.application.search.request_normalizer import SearchRequestNormalizer
from directory_search.domain.value_objects import TenantId

normalizer = SearchRequestNormalizer()

tenant_ids = st.from_regex(r"\A[a-z0-9][a-z0-9_.-]{0,15}\Z")


def _key(tenant, params):
    return build_search_cache_key(normalizer.normalize(TenantId(tenant), params))


class TestCacheKeyShape:

    def test_key_is_prefixed_with_tenant(self):
        key = _key("acme", {"q": "john"})
        prefix, tenant, payload = key.split(":")

        assert prefix == "search"
        assert tenant == "acme"
        assert json.loads(base64.b64decode(payload))["query"] == "john"

    def test_tenant_pattern(self):
        assert tenant_cache_pattern(TenantId("acme")) == "search:acme:*"


class TestCacheKeyNormalization:

    def test_query_case_and_whitespace_do_not_matter(self):
        assert _key("acme", {"q": "John  Doe"}) == _key("acme", {"q": " john doe "})

    def test_skill_order_and_case_do_not_matter(self):
        assert _key("acme", {"q": "x", "skills": "Go,Python"}) == _key("acme", {"q": "x", "skills": "python, go"})

    def test_department_case_does_not_matter(self):
        assert _key("acme", {"q": "x", "department": "Sales"}) == _key("acme", {"q": "x", "department": "sales"})

    def test_pagination_changes_key(self):
        assert _key("acme", {"q": "x", "page": "1"}) != _key("acme", {"q": "x", "page": "2"})

    def test_weights_change_key(self):
        assert _key("acme", {"q": "x"}) != _key("acme", {"q": "x", "exactWeight": "2"})

    def test_threshold_changes_key(self):
        assert _key("acme", {"q": "x"}) != _key("acme", {"q": "x", "fuzzyThreshold": "0.8"})


class TestTenantIsolation:

    def test_same_request_different_tenants(self):
        assert _key("acme", {"q": "john"}) != _key("acme-eu", {"q": "john"})

    def test_tenant_pattern_does_not_match_prefixed_tenant(self):
        pattern_prefix = tenant_cache_pattern(TenantId("acme"))[:-1]

        assert _key("acme", {"q": "john"}).startswith(pattern_prefix)
        assert not _key("acme-eu", {"q": "john"}).startswith(pattern_prefix)
        assert not _key("acme1", {"q": "john"}).startswith(pattern_prefix)

    @given(tenant_ids, tenant_ids, st.text(min_size=1, max_size=20))
    def test_keys_of_distinct_tenants_never_collide(self, tenant_a, tenant_b, query):
        assume(tenant_a != tenant_b)
        key_a = _key(tenant_a, {"q": query})
        key_b = _key(tenant_b, {"q": query})

        assert key_a != key_b
        assert not key_b.startswith(tenant_cache_pattern(TenantId(tenant_a))[:-1])
