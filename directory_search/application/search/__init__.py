"""
Search Application Services

Orchestrates directory search workflows across domain services and
infrastructure collaborators:
- SearchApplicationService: search, autocomplete, suggestions, analytics, cache admin
- SearchRequestNormalizer: raw parameters to canonical SearchRequest
- SearchResultAssembler: response assembly and analytics hand-off
"""

from directory_search.application.search.cache_keys import (
    build_search_cache_key,
    tenant_cache_pattern,
)
from directory_search.application.search.request_normalizer import SearchRequestNormalizer
from directory_search.application.search.result_assembler import (
    SearchOutcome,
    SearchResultAssembler,
)
from directory_search.application.search.search_application_service import SearchApplicationService

__all__ = [
    "SearchApplicationService",
    "SearchRequestNormalizer",
    "SearchResultAssembler",
    "SearchOutcome",
    "build_search_cache_key",
    "tenant_cache_pattern",
]
