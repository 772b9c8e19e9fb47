"""Dependencies required by SearchApplicationService."""

from __future__ import annotations

from dataclasses import dataclass, field

from directory_search.application.search.request_normalizer import SearchRequestNormalizer
from directory_search.domain.interfaces import (
    ICacheService,
    IEmployeeDirectory,
    ISearchAnalyticsService,
    ISearchEventDispatcher,
)
from directory_search.domain.services import (
    AutocompleteService,
    MatchingService,
    RankingService,
    SuggestionService,
)


@dataclass
class SearchDependencies:
    """Dependencies required by SearchApplicationService."""

    # Collaborators (infrastructure layer)
    employee_directory: IEmployeeDirectory
    cache_service: ICacheService
    event_dispatcher: ISearchEventDispatcher
    analytics_service: ISearchAnalyticsService

    # Domain services
    matching_service: MatchingService = field(default_factory=MatchingService)
    ranking_service: RankingService = field(default_factory=RankingService)
    suggestion_service: SuggestionService = field(default_factory=SuggestionService)
    autocomplete_service: AutocompleteService = field(default_factory=AutocompleteService)
    normalizer: SearchRequestNormalizer = field(default_factory=SearchRequestNormalizer)

    # Tuning
    cache_ttl_seconds: int = 300
    latency_budget_ms: float = 500.0
