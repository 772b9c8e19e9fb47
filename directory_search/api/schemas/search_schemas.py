"""
Search API Schemas

Request and response models for the directory search endpoints. Field names
are snake_case in Python and camelCase on the wire.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from directory_search.application.search.result_assembler import SearchOutcome
from directory_search.domain.entities.employee import EmployeeProjection
from directory_search.domain.entities.search_result import RankedEntry


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class EmployeeSummary(CamelModel):
    """Read-only employee projection returned in search results"""

    id: str = Field(..., description="Employee identifier")
    tenant_id: str = Field(..., description="Owning tenant")
    first_name: str = Field(..., description="First name")
    last_name: str = Field(..., description="Last name")
    email: str = Field("", description="Work email")
    title: Optional[str] = Field(None, description="Job title")
    department: Optional[str] = Field(None, description="Department")
    skills: List[str] = Field(default_factory=list, description="Skills")
    is_active: bool = Field(True, description="Employment is active")
    photo_url: Optional[str] = Field(None, description="Profile photo URL")

    @classmethod
    def from_projection(cls, employee: EmployeeProjection) -> "EmployeeSummary":
        return cls(
            id=employee.id,
            tenant_id=employee.tenant_id,
            first_name=employee.first_name,
            last_name=employee.last_name,
            email=employee.email,
            title=employee.title,
            department=employee.department,
            skills=list(employee.skills),
            is_active=employee.is_active,
            photo_url=employee.photo_url,
        )


class SearchResultItem(CamelModel):
    """A ranked search hit"""

    employee: EmployeeSummary
    score: float = Field(..., description="Final ranking score")
    match_type: str = Field(..., description="Best match type among matched fields")
    matched_fields: List[str] = Field(default_factory=list, description="Fields that matched")

    @classmethod
    def from_entry(cls, entry: RankedEntry) -> "SearchResultItem":
        return cls(
            employee=EmployeeSummary.from_projection(entry.employee),
            score=entry.score,
            match_type=entry.match_type.value,
            matched_fields=list(entry.matched_fields),
        )


class SearchFiltersEcho(CamelModel):
    """Filters applied to the search, after normalization"""

    department: Optional[str] = None
    title: Optional[str] = None
    skills: Optional[List[str]] = None
    include_inactive: bool = False


class SearchMeta(CamelModel):
    """Response metadata"""

    response_time: str = Field(..., description="Wall-clock response time, e.g. '12ms'")
    cached: bool = Field(False, description="Served from the result cache")
    result_count: int = Field(0, description="Number of results on this page")
    search_types: List[str] = Field(default_factory=list, description="Match types present on this page")


class SearchResponse(CamelModel):
    """Search response"""

    results: List[SearchResultItem] = Field(default_factory=list)
    total: int = Field(0, description="Matches before pagination")
    page: int = Field(1)
    page_size: int = Field(20)
    has_more: bool = Field(False)
    query: str = Field("")
    execution_time: float = Field(0.0, description="Execution time in milliseconds")
    suggestions: List[str] = Field(default_factory=list)
    filters: SearchFiltersEcho = Field(default_factory=SearchFiltersEcho)
    meta: SearchMeta
    message: Optional[str] = None

    @classmethod
    def from_outcome(cls, outcome: SearchOutcome) -> "SearchResponse":
        result = outcome.result
        filters = outcome.request.filters
        return cls(
            results=[SearchResultItem.from_entry(entry) for entry in result.results],
            total=result.total,
            page=result.page,
            page_size=result.page_size,
            has_more=result.has_more,
            query=result.query,
            execution_time=result.execution_time_ms,
            suggestions=list(result.suggestions),
            filters=SearchFiltersEcho(
                department=filters.department,
                title=filters.title,
                skills=sorted(filters.skills) or None,
                include_inactive=filters.include_inactive,
            ),
            meta=SearchMeta(
                response_time=f"{int(round(result.execution_time_ms))}ms",
                cached=result.cached,
                result_count=len(result.results),
                search_types=result.match_types,
            ),
            message=outcome.message,
        )


class AutocompleteResponse(CamelModel):
    """Autocomplete response"""

    suggestions: List[str] = Field(default_factory=list)
    query: str = Field("")
    type: str = Field("all")
    count: int = Field(0)


class SuggestionsResponse(CamelModel):
    """Did-you-mean suggestions response"""

    suggestions: List[str] = Field(default_factory=list)
    query: str = Field("")
    count: int = Field(0)
    message: Optional[str] = None


class TrackSearchRequest(CamelModel):
    """Click-tracking payload; validated by the application service"""

    query: Optional[Any] = None
    result_count: Optional[Any] = None
    clicked_result: Optional[str] = None


class MessageResponse(CamelModel):
    message: str


class ClearCacheResponse(CamelModel):
    message: str
    keys_cleared: int = 0


class SearchStatistics(CamelModel):
    total_searches: int = 0
    unique_queries: int = 0
    average_results: int = 0
    average_execution_time: int = 0


class TopQuery(CamelModel):
    query: str
    count: int
    average_results: int = 0
    average_execution_time: int = 0


class SearchTrend(CamelModel):
    date: str
    search_count: int


class CacheStatus(CamelModel):
    enabled: bool
    connected: bool


class SearchStatsResponse(CamelModel):
    """Admin search statistics"""

    period: str
    statistics: SearchStatistics
    top_queries: List[TopQuery] = Field(default_factory=list)
    trends: List[SearchTrend] = Field(default_factory=list)
    cache_status: CacheStatus
