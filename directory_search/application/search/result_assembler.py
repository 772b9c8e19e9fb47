"""Builds search responses and hands analytics events off without blocking."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

import structlog

from directory_search.domain.interfaces import ISearchEventDispatcher, SearchEvent
from directory_search.domain.entities.search_result import SearchResult
from directory_search.domain.services.ranking_service import RankedPage
from directory_search.domain.value_objects import SearchRequest

logger = structlog.get_logger(__name__)

EMPTY_QUERY_MESSAGE = "Please enter a search term"


@dataclass(frozen=True)
class SearchOutcome:
    """A search result together with the canonical request that produced it."""

    request: SearchRequest
    result: SearchResult

    @property
    def cached(self) -> bool:
        return self.result.cached

    @property
    def message(self) -> Optional[str]:
        if self.request.is_empty:
            return EMPTY_QUERY_MESSAGE
        if self.result.total > 0:
            return None
        query = self.request.query_text
        if self.result.suggestions:
            return f'No results found for "{query}". Did you mean: {", ".join(self.result.suggestions)}?'
        return f'No results found for "{query}". Try different keywords or check spelling.'


class SearchResultAssembler:
    """Merges ranked entries, suggestions and timing into a SearchResult."""

    def __init__(self, event_dispatcher: Optional[ISearchEventDispatcher] = None):
        self._dispatcher = event_dispatcher

    def assemble(
        self,
        request: SearchRequest,
        page: RankedPage,
        suggestions: Sequence[str],
        execution_time_ms: float,
    ) -> SearchResult:
        return SearchResult(
            results=page.entries,
            total=page.total,
            page=request.pagination.page,
            page_size=request.pagination.page_size,
            has_more=page.has_more,
            query=request.query_text,
            execution_time_ms=execution_time_ms,
            suggestions=tuple(suggestions) if page.total == 0 else (),
        )

    def record_search(
        self,
        request: SearchRequest,
        result: SearchResult,
        user_id: Optional[str] = None,
    ) -> bool:
        """Queue a search analytics event. Never raises."""
        if self._dispatcher is None:
            return False

        event = SearchEvent(
            tenant_id=str(request.tenant_id),
            user_id=user_id,
            query=request.query_text,
            result_count=result.total,
            execution_time_ms=result.execution_time_ms,
            filters=request.filters.to_dict(),
        )
        try:
            return self._dispatcher.dispatch(event)
        except Exception as e:
            logger.error(
                "Search analytics dispatch failed",
                tenant_id=event.tenant_id,
                error=str(e),
            )
            return False
