"""Pydantic models for search input/output.

Field names are snake_case in Python and camelCase on the wire, matching the
document attributes stored in the backend.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

RecordKind = Literal["contract", "file", "department", "vendor"]
QuickSearchType = Literal["all-contracts", "departments", "vendors", "active"]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


# ═══════════════ FILTERS ═══════════════

class SearchFilters(CamelModel):
    """Structured filters: every field optional, all present ones must hold."""

    type: list[str] | None = None
    start_date: str | None = None
    end_date: str | None = None
    department: str | None = None
    status: str | None = None
    priority: str | None = None
    vendor: str | None = None
    contract_type: str | None = None
    amount_min: float | None = None
    amount_max: float | None = None
    assigned_managers: list[str] | None = None
    compliance: list[str] | None = None
    expiry_date_start: str | None = None
    expiry_date_end: str | None = None

    def is_empty(self) -> bool:
        return not self.to_wire()


# ═══════════════ SEARCH OUTPUT ═══════════════

class SearchResult(CamelModel):
    """A record projected for display, with its relevance score."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    type: RecordKind
    name: str
    contract_name: str | None = None
    vendor: str | None = None
    department: str | None = None
    status: str | None = None
    priority: str | None = None
    amount: float | None = None
    contract_expiry_date: str | None = None
    assigned_managers: list[str] | None = None
    contract_type: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    search_score: int = 0


class Pagination(CamelModel):
    limit: int
    offset: int
    has_more: bool


class SearchResponse(CamelModel):
    results: list[SearchResult] = Field(default_factory=list)
    total: int = 0
    query: str = ""
    filters: SearchFilters = Field(default_factory=SearchFilters)
    pagination: Pagination


# ═══════════════ HISTORY & SAVED SEARCHES ═══════════════

class RecentSearch(CamelModel):
    query: str
    timestamp: str
    result_count: int = 0


class SavedSearch(CamelModel):
    id: str
    user_id: str
    name: str
    query: str = ""
    filters: SearchFilters = Field(default_factory=SearchFilters)
    created_at: str = ""


class SaveSearchRequest(CamelModel):
    user_id: str
    name: str
    query: str = ""
    filters: SearchFilters = Field(default_factory=SearchFilters)


# ═══════════════ ANALYTICS ═══════════════

class AnalyticsEventRequest(CamelModel):
    """Explicit analytics event posted by a client."""

    user_id: str
    query: str
    filters: SearchFilters = Field(default_factory=SearchFilters)
    result_count: int = 0
    search_time: int = 0


class QueryCount(CamelModel):
    query: str
    count: int


class FilterCount(CamelModel):
    filter: str
    count: int


class AnalyticsRecentSearch(CamelModel):
    query: str
    filters: dict[str, Any] = Field(default_factory=dict)
    result_count: int = 0
    search_time: int = 0
    timestamp: str = ""


class AnalyticsSummary(CamelModel):
    total_searches: int = 0
    average_search_time: float = 0.0
    top_searches: list[QueryCount] = Field(default_factory=list)
    top_filters: list[FilterCount] = Field(default_factory=list)
    recent_searches: list[AnalyticsRecentSearch] = Field(default_factory=list)
