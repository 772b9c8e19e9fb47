"""
Search API Endpoints

Employee directory search with:
- Multi-field exact, partial and fuzzy matching with tunable weights
- Tenant-scoped result caching
- Did-you-mean suggestions and prefix autocomplete
- Search analytics (click tracking, admin statistics)
"""

from typing import Any, Dict, Optional

import structlog
from fastapi import APIRouter, Body, Query, Request

from directory_search.api.dependencies import (
    RequestContextDep,
    SearchServiceDep,
    map_domain_exception_to_http,
    require_admin,
)
from directory_search.api.schemas.search_schemas import (
    AutocompleteResponse,
    ClearCacheResponse,
    MessageResponse,
    SearchResponse,
    SearchStatsResponse,
    SuggestionsResponse,
    TrackSearchRequest,
)
from directory_search.domain.exceptions import DomainException

logger = structlog.get_logger(__name__)
router = APIRouter(prefix="/search", tags=["search"])


def _query_params(request: Request) -> Dict[str, Any]:
    """Query parameters as a mapping; repeated keys become lists."""
    params: Dict[str, Any] = {}
    for key in request.query_params.keys():
        values = request.query_params.getlist(key)
        params[key] = values if len(values) > 1 else values[0]
    return params


@router.get("", response_model=SearchResponse)
async def search_employees(
    request: Request,
    context: RequestContextDep,
    search_service: SearchServiceDep,
) -> SearchResponse:
    """
    Search the caller's tenant directory.

    Query parameters: `q`/`query`, `department`, `title`, `skills`
    (comma-separated), `includeInactive`, `page`, `pageSize`,
    `fuzzyThreshold`, `customWeights`, `exactWeight`, `fuzzyWeight`,
    `partialWeight`.
    """
    try:
        outcome = await search_service.search(
            context.tenant_id,
            _query_params(request),
            user_id=context.user_id,
        )
    except DomainException as domain_exc:
        raise map_domain_exception_to_http(domain_exc)

    return SearchResponse.from_outcome(outcome)


@router.get("/suggestions", response_model=SuggestionsResponse, response_model_exclude_none=True)
async def get_suggestions(
    context: RequestContextDep,
    search_service: SearchServiceDep,
    q: str = Query("", description="Query to find alternatives for"),
    limit: Optional[str] = Query(None, description="Maximum suggestions (1-10, default 5)"),
) -> SuggestionsResponse:
    """Did-you-mean alternatives drawn from names, titles and departments."""
    try:
        suggestions = await search_service.suggest(context.tenant_id, q, limit=limit)
    except DomainException as domain_exc:
        raise map_domain_exception_to_http(domain_exc)

    message = None
    if len(q.strip()) < 2:
        message = "Enter at least 2 characters" if not q.strip() else "Query too short"

    return SuggestionsResponse(
        suggestions=suggestions,
        query=q,
        count=len(suggestions),
        message=message,
    )


@router.get("/autocomplete", response_model=AutocompleteResponse)
async def autocomplete(
    context: RequestContextDep,
    search_service: SearchServiceDep,
    q: str = Query("", description="Prefix (at least 2 characters)"),
    type: str = Query("all", description="names, titles, departments, skills or all"),
    limit: Optional[str] = Query(None, description="Maximum values (1-10, default 5)"),
) -> AutocompleteResponse:
    """Prefix completion over distinct values of active employees."""
    try:
        suggestions = await search_service.autocomplete(
            context.tenant_id,
            q,
            autocomplete_type=type,
            limit=limit,
        )
    except DomainException as domain_exc:
        raise map_domain_exception_to_http(domain_exc)

    return AutocompleteResponse(
        suggestions=suggestions,
        query=q,
        type=type,
        count=len(suggestions),
    )


@router.post("/track", response_model=MessageResponse)
async def track_search(
    context: RequestContextDep,
    search_service: SearchServiceDep,
    payload: Optional[TrackSearchRequest] = Body(None),
) -> MessageResponse:
    """Record a click on a search result."""
    payload = payload or TrackSearchRequest()
    try:
        await search_service.track_search(
            context.tenant_id,
            context.user_id,
            query=payload.query,
            result_count=payload.result_count,
            clicked_result=payload.clicked_result,
        )
    except DomainException as domain_exc:
        raise map_domain_exception_to_http(domain_exc)

    return MessageResponse(message="Search analytics tracked successfully")


@router.get("/stats", response_model=SearchStatsResponse)
async def get_search_stats(
    context: RequestContextDep,
    search_service: SearchServiceDep,
    days: Optional[str] = Query(None, description="Window in days (1-365, default 30)"),
) -> SearchStatsResponse:
    """Search statistics for the caller's tenant (admin only)."""
    try:
        require_admin(context, "view search statistics")
        stats = await search_service.get_search_stats(context.tenant_id, days=days)
    except DomainException as domain_exc:
        raise map_domain_exception_to_http(domain_exc)

    return SearchStatsResponse.model_validate(stats)


@router.delete("/cache", response_model=ClearCacheResponse)
async def clear_search_cache(
    context: RequestContextDep,
    search_service: SearchServiceDep,
) -> ClearCacheResponse:
    """Remove every cached search of the caller's tenant (admin only)."""
    try:
        require_admin(context, "clear search cache")
        keys_cleared = await search_service.clear_cache(context.tenant_id)
    except DomainException as domain_exc:
        raise map_domain_exception_to_http(domain_exc)

    logger.info(
        "Search cache cleared by admin",
        tenant_id=str(context.tenant_id),
        user_id=context.user_id,
        keys_cleared=keys_cleared,
    )
    return ClearCacheResponse(
        message=f"Search cache cleared successfully ({keys_cleared} entries removed)",
        keys_cleared=keys_cleared,
    )
