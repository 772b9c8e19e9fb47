"""Application layer orchestrator for directory search workflows."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Sequence

import structlog

from directory_search.application.search.cache_keys import (
    build_search_cache_key,
    tenant_cache_pattern,
)
from directory_search.application.search.result_assembler import SearchOutcome, SearchResultAssembler
from directory_search.domain.entities.employee import EmployeeProjection
from directory_search.domain.entities.search_result import SearchResult
from directory_search.domain.exceptions import (
    AnalyticsUnavailableError,
    SearchUnavailableError,
    ValidationError,
)
from directory_search.domain.interfaces import SearchEvent
from directory_search.domain.services.autocomplete_service import (
    DEFAULT_LIMIT,
    MIN_PREFIX_LENGTH,
    clamp_limit,
)
from directory_search.domain.value_objects import (
    AutocompleteType,
    SearchFilters,
    SearchRequest,
    TenantId,
)

if TYPE_CHECKING:
    from directory_search.application.dependencies.search_dependencies import SearchDependencies


logger = structlog.get_logger(__name__)

DEFAULT_STATS_DAYS = 30
MAX_STATS_DAYS = 365


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 3)


def _parse_limit(raw: Any, field: str) -> int:
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return DEFAULT_LIMIT
    try:
        return clamp_limit(int(raw))
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be an integer", field=field)


class SearchApplicationService:
    """Coordinates normalization, caching, matching, ranking and analytics.

    Control flow for a search:
    normalize -> cache lookup -> (miss) tenant snapshot -> match -> rank ->
    paginate -> suggestions on zero results -> assemble -> cache write ->
    analytics hand-off.
    """

    def __init__(self, dependencies: SearchDependencies) -> None:
        self._deps = dependencies
        self._assembler = SearchResultAssembler(dependencies.event_dispatcher)

    async def search(
        self,
        tenant_id: TenantId,
        params: Mapping[str, Any],
        user_id: Optional[str] = None,
    ) -> SearchOutcome:
        """Run a search for the authenticated tenant.

        Raises:
            ValidationError: if a parameter cannot be parsed
            SearchUnavailableError: if the employee store fails
        """
        started = time.perf_counter()
        tenant_id = TenantId(tenant_id)
        normalizer = self._deps.normalizer

        if not normalizer.query_text(params):
            request = SearchRequest(tenant_id=tenant_id, query_text="")
            result = SearchResult.empty(
                query="",
                page=1,
                page_size=normalizer.default_page_size,
                execution_time_ms=_elapsed_ms(started),
            )
            return SearchOutcome(request=request, result=result)

        request = normalizer.normalize(tenant_id, params)
        cache_key = build_search_cache_key(request)

        logger.info(
            "Search started",
            tenant_id=str(tenant_id),
            query=request.query_text,
            page=request.pagination.page,
            page_size=request.pagination.page_size,
        )

        cached_result = await self._cached_result(cache_key, tenant_id)
        if cached_result is not None:
            result = cached_result.with_timing(_elapsed_ms(started), cached=True)
            self._log_completion(request, result)
            return SearchOutcome(request=request, result=result)

        employees = await self._load_employees(tenant_id, request.filters)

        matches = self._deps.matching_service.match_all(
            employees, request.terms, request.options
        )
        ranked = self._deps.ranking_service.rank(matches, request.options.ranking_weights)
        page = self._deps.ranking_service.paginate(ranked, request.pagination)

        suggestions: Sequence[str] = ()
        if page.total == 0:
            suggestions = await self._suggestions_for(request, employees)

        result = self._assembler.assemble(
            request=request,
            page=page,
            suggestions=suggestions,
            execution_time_ms=_elapsed_ms(started),
        )

        if result.total > 0:
            await self._cache_set(cache_key, result.to_dict())

        self._assembler.record_search(request, result, user_id=user_id)
        self._log_completion(request, result)
        return SearchOutcome(request=request, result=result)

    async def autocomplete(
        self,
        tenant_id: TenantId,
        prefix: Optional[str],
        autocomplete_type: Optional[str] = None,
        limit: Any = None,
    ) -> List[str]:
        """Distinct field values of active employees that start with ``prefix``."""
        try:
            selected_type = AutocompleteType((autocomplete_type or AutocompleteType.ALL.value).lower())
        except ValueError:
            allowed = ", ".join(item.value for item in AutocompleteType)
            raise ValidationError(f"type must be one of: {allowed}", field="type")

        resolved_limit = _parse_limit(limit, "limit")
        prefix = (prefix or "").strip()
        if len(prefix) < MIN_PREFIX_LENGTH:
            return []

        employees = await self._load_employees(TenantId(tenant_id), SearchFilters())
        return self._deps.autocomplete_service.complete(
            prefix,
            employees,
            autocomplete_type=selected_type,
            limit=resolved_limit,
        )

    async def suggest(
        self,
        tenant_id: TenantId,
        query: Optional[str],
        limit: Any = None,
    ) -> List[str]:
        """Did-you-mean alternatives for a query, drawn from the tenant corpus."""
        resolved_limit = _parse_limit(limit, "limit")
        normalized = " ".join((query or "").split())
        if len(normalized) < MIN_PREFIX_LENGTH:
            return []

        employees = await self._load_employees(TenantId(tenant_id), SearchFilters())
        return self._deps.suggestion_service.suggest(normalized, employees, limit=resolved_limit)

    async def track_search(
        self,
        tenant_id: TenantId,
        user_id: Optional[str],
        query: Any,
        result_count: Any = 0,
        clicked_result: Optional[str] = None,
    ) -> None:
        """Queue a click-tracking event for a previously executed search.

        Raises:
            ValidationError: if ``query`` is missing
            AnalyticsUnavailableError: if the event could not be queued
        """
        if not isinstance(query, str) or not query.strip():
            raise ValidationError("Query is required", field="query")

        try:
            count = int(result_count or 0)
        except (TypeError, ValueError):
            count = 0

        event = SearchEvent(
            tenant_id=str(TenantId(tenant_id)),
            user_id=user_id,
            query=query.strip(),
            result_count=count,
            execution_time_ms=0.0,
            clicked_result=clicked_result or None,
            event_type="search_click",
        )
        if not self._deps.event_dispatcher.dispatch(event):
            raise AnalyticsUnavailableError("Failed to track search analytics")

    async def get_search_stats(self, tenant_id: TenantId, days: Any = None) -> Dict[str, Any]:
        """Aggregated search analytics of the tenant plus cache status."""
        try:
            window = int(days) if days not in (None, "") else DEFAULT_STATS_DAYS
        except (TypeError, ValueError):
            window = DEFAULT_STATS_DAYS
        window = max(1, min(MAX_STATS_DAYS, window or DEFAULT_STATS_DAYS))

        stats = await self._deps.analytics_service.get_search_statistics(
            str(TenantId(tenant_id)), days=window
        )
        cache_health = await self._deps.cache_service.check_health()
        return {
            **stats,
            "cacheStatus": {
                "enabled": cache_health.get("service") != "NullCacheService",
                "connected": cache_health.get("status") == "healthy",
            },
        }

    async def clear_cache(self, tenant_id: TenantId) -> int:
        """Remove every cached search of one tenant, returning the count removed."""
        pattern = tenant_cache_pattern(TenantId(tenant_id))
        try:
            removed = await self._deps.cache_service.clear(pattern)
        except Exception as e:
            logger.error("Search cache clear failed", tenant_id=str(tenant_id), error=str(e))
            return 0

        logger.info("Search cache cleared", tenant_id=str(tenant_id), keys_cleared=removed)
        return removed

    async def _load_employees(
        self,
        tenant_id: TenantId,
        filters: SearchFilters,
    ) -> List[EmployeeProjection]:
        try:
            employees = await self._deps.employee_directory.list_active_employees(tenant_id, filters)
        except SearchUnavailableError:
            raise
        except Exception as e:
            logger.error("Employee directory failed", tenant_id=str(tenant_id), error=str(e))
            raise SearchUnavailableError("Search temporarily unavailable") from e

        owned = [employee for employee in employees if employee.tenant_id == str(tenant_id)]
        if len(owned) != len(employees):
            logger.error(
                "Employee directory returned records of another tenant",
                tenant_id=str(tenant_id),
                dropped=len(employees) - len(owned),
            )
        return owned

    async def _suggestions_for(
        self,
        request: SearchRequest,
        filtered_employees: Sequence[EmployeeProjection],
    ) -> List[str]:
        """Suggestions never fail the search; errors yield an empty list."""
        try:
            if request.filters == SearchFilters():
                corpus = filtered_employees
            else:
                corpus = await self._load_employees(request.tenant_id, SearchFilters())
            return self._deps.suggestion_service.suggest(request.normalized_query, corpus)
        except Exception as e:
            logger.warning(
                "Suggestion generation failed",
                tenant_id=str(request.tenant_id),
                error=str(e),
            )
            return []

    async def _cached_result(self, key: str, tenant_id: TenantId) -> Optional[SearchResult]:
        try:
            payload = await self._deps.cache_service.get(key)
        except Exception as e:
            logger.warning("Search cache read failed", error=str(e))
            return None

        if payload is None:
            return None

        try:
            result = SearchResult.from_dict(payload)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Ignoring malformed cached search result", error=str(e))
            return None

        if any(entry.employee.tenant_id != str(tenant_id) for entry in result.results):
            logger.error("Cached search result belongs to another tenant", tenant_id=str(tenant_id))
            return None

        return result

    async def _cache_set(self, key: str, payload: Dict[str, Any]) -> None:
        try:
            await self._deps.cache_service.set(key, payload, ttl=self._deps.cache_ttl_seconds)
        except Exception as e:
            logger.warning("Search cache write failed", error=str(e))

    def _log_completion(self, request: SearchRequest, result: SearchResult) -> None:
        logger.info(
            "Search completed",
            tenant_id=str(request.tenant_id),
            total=result.total,
            returned=len(result.results),
            cached=result.cached,
            execution_time_ms=result.execution_time_ms,
        )
        if result.execution_time_ms > self._deps.latency_budget_ms:
            logger.warning(
                "Search exceeded latency budget",
                tenant_id=str(request.tenant_id),
                query=request.query_text,
                execution_time_ms=result.execution_time_ms,
                budget_ms=self._deps.latency_budget_ms,
            )
