"""Pure domain services of the search engine."""

from .autocomplete_service import AutocompleteService
from .matching_service import MatchingService
from .ranking_service import RankingService
from .suggestion_service import SuggestionService
from .text_similarity import levenshtein_distance, similarity

__all__ = [
    "AutocompleteService",
    "MatchingService",
    "RankingService",
    "SuggestionService",
    "levenshtein_distance",
    "similarity",
]
