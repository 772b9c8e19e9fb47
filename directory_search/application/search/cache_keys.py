"""Tenant-qualified cache keys for search results.

Keys have the form ``search:<tenant>:<base64 payload>``. Tenant ids cannot
contain ``:`` and base64 output never does either, so the tenant segment of
a key is unambiguous and ``search:<tenant>:*`` only ever matches keys of
that tenant.
"""

import base64
import json
from typing import Any, Dict

from directory_search.domain.value_objects import SearchRequest, TenantId

CACHE_KEY_PREFIX = "search"
KEY_SEPARATOR = ":"


def canonical_payload(request: SearchRequest) -> Dict[str, Any]:
    """Everything that influences the result, in a normalized form."""
    filters = request.filters
    options = request.options
    return {
        "query": request.normalized_query,
        "filters": {
            "department": filters.department.lower() if filters.department else None,
            "title": filters.title.lower() if filters.title else None,
            "skills": sorted({skill.lower() for skill in filters.skills}),
            "includeInactive": filters.include_inactive,
        },
        "pagination": {
            "page": request.pagination.page,
            "pageSize": request.pagination.page_size,
        },
        "options": {
            "fuzzyThreshold": options.fuzzy_threshold,
            "rankingWeights": options.ranking_weights.to_dict(),
        },
    }


def build_search_cache_key(request: SearchRequest) -> str:
    encoded = json.dumps(
        canonical_payload(request),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    ).encode("utf-8")
    digest = base64.b64encode(encoded).decode("ascii")
    return KEY_SEPARATOR.join((CACHE_KEY_PREFIX, str(request.tenant_id), digest))


def tenant_cache_pattern(tenant_id: TenantId) -> str:
    """Pattern matching every cached search of one tenant."""
    return f"{CACHE_KEY_PREFIX}{KEY_SEPARATOR}{TenantId(tenant_id)}{KEY_SEPARATOR}*"
