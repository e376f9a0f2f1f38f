"""Search: advanced search engine, relevance scoring and saved searches."""

from contract_search.search.engine import SearchEngine
from contract_search.search.saved import SavedSearchService
from contract_search.search.scoring import calculate_search_score

__all__ = ["SavedSearchService", "SearchEngine", "calculate_search_score"]
