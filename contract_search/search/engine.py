"""SearchEngine: advanced search, suggestions, recent searches and quick searches.

Flow of search():
  validate → [fetch contracts || fetch files] (filters applied by the store)
  → text match + score in memory → sort (score desc, createdAt desc)
  → paginate → history write (best-effort) → envelope

Known scalability ceiling: each collection fetch is capped at
SEARCH_FETCH_LIMIT documents, so on a large corpus only the first page the
store returns (under the requested ordering) is matched and counted in total.
"""

import asyncio
import logging
import time
import uuid
from datetime import datetime
from typing import Any, Callable

from contract_search.errors import SearchValidationError, UpstreamFetchError
from contract_search.schemas import (
    Pagination,
    QuickSearchType,
    RecentSearch,
    SearchFilters,
    SearchResponse,
    SearchResult,
)
from contract_search.search.collections import CollectionIds
from contract_search.search.filters import (
    build_filter_predicates,
    build_order_predicate,
    encode_filters,
    selected_kinds,
    validate_filters,
    validate_pagination,
    validate_sort,
)
from contract_search.search.scoring import calculate_search_score, matches_query
from contract_search.storage.base import Predicate, RecordStore
from contract_search.utils.timestamps import EPOCH, parse_timestamp, to_iso, utc_now

logger = logging.getLogger(__name__)

SEARCH_FETCH_LIMIT = 200
SUGGESTION_FETCH_LIMIT = 50
MAX_SUGGESTIONS = 10
MIN_SUGGESTION_QUERY = 2
RECENT_SCAN_LIMIT = 100

QUICK_SEARCH_FETCH_LIMIT = 200
QUICK_SEARCH_SCORE = 100
QUICK_SEARCH_TYPES = ("all-contracts", "departments", "vendors", "active")
UNRESTRICTED_ROLES = ("admin", "executive")


class SearchEngine:
    """Stateless per call: holds only its collaborators."""

    def __init__(
        self,
        store: RecordStore,
        collections: CollectionIds | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.collections = collections or CollectionIds.from_settings()
        self._clock = clock

    # ═══════════════ ADVANCED SEARCH ═══════════════

    async def search(
        self,
        query: str,
        user_id: str,
        filters: SearchFilters | None = None,
        sort_by: str = "createdAt",
        sort_order: str = "desc",
        limit: int = 25,
        offset: int = 0,
    ) -> SearchResponse:
        query = query or ""
        filters = filters or SearchFilters()
        validate_pagination(limit, offset)
        validate_sort(sort_by, sort_order)
        validate_filters(filters)

        start = time.monotonic()
        predicates = build_filter_predicates(filters)
        predicates.append(build_order_predicate(sort_by, sort_order))
        predicates.append(Predicate.limit(SEARCH_FETCH_LIMIT))

        kinds = selected_kinds(filters)
        outcomes = await asyncio.gather(
            *(self._list(self.collections.for_kind(kind), predicates) for kind in kinds),
            return_exceptions=True,
        )
        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                raise outcome

        candidates = [(kind, doc) for kind, docs in zip(kinds, outcomes) for doc in docs]

        if query.strip():
            results = [
                _to_result(kind, doc, calculate_search_score(doc, query))
                for kind, doc in candidates
                if matches_query(doc, query)
            ]
        else:
            results = [_to_result(kind, doc, 0) for kind, doc in candidates]

        results.sort(key=lambda r: (r.search_score, _created_ts(r)), reverse=True)

        total = len(results)
        page = results[offset:offset + limit]

        await self._record_history(user_id, query, filters, total)

        elapsed_ms = int((time.monotonic() - start) * 1000)
        logger.info(
            "Search completed | candidates=%d | total=%d | returned=%d | %dms | query=%s",
            len(candidates), total, len(page), elapsed_ms, query[:80],
        )
        return SearchResponse(
            results=page,
            total=total,
            query=query,
            filters=filters,
            pagination=Pagination(limit=limit, offset=offset, has_more=offset + limit < total),
        )

    async def _record_history(
        self, user_id: str, query: str, filters: SearchFilters, result_count: int,
    ) -> None:
        """Best-effort history write: never fails the search."""
        if not user_id:
            logger.debug("Search history skipped | anonymous user")
            return
        try:
            await self.store.create_document(
                self.collections.search_history,
                uuid.uuid4().hex,
                {
                    "userId": user_id,
                    "query": query,
                    "filters": encode_filters(filters),
                    "resultCount": result_count,
                    "timestamp": to_iso(self._clock()),
                },
            )
        except Exception as e:
            logger.warning("Search history write failed | user=%s | %s", user_id, str(e)[:200])

    # ═══════════════ SUGGESTIONS ═══════════════

    async def suggest(self, query: str) -> list[str]:
        """Up to MAX_SUGGESTIONS names, vendors and numbers containing the query.

        Only the first SUGGESTION_FETCH_LIMIT documents of each collection are
        scanned. One collection failing contributes nothing; both failing raises.
        """
        if not query or len(query) < MIN_SUGGESTION_QUERY:
            return []

        predicates = [Predicate.limit(SUGGESTION_FETCH_LIMIT)]
        contracts, files = await asyncio.gather(
            self._list(self.collections.contracts, predicates),
            self._list(self.collections.files, predicates),
            return_exceptions=True,
        )

        failures = [o for o in (contracts, files) if isinstance(o, BaseException)]
        for failure in failures:
            if not isinstance(failure, UpstreamFetchError):
                raise failure
            logger.warning("Suggestions | %s", failure.message)
        if len(failures) == 2:
            raise UpstreamFetchError(
                f"{self.collections.contracts},{self.collections.files}", cause=failures[0].cause,
            )

        query_lower = query.lower()
        found: dict[str, None] = {}
        if not isinstance(contracts, BaseException):
            for doc in contracts:
                for field in ("contractName", "vendor", "contractNumber"):
                    _add_suggestion(found, doc.get(field), query_lower)
        if not isinstance(files, BaseException):
            for doc in files:
                _add_suggestion(found, doc.get("name"), query_lower)

        ranked = sorted(found, key=lambda s: _suggestion_rank(s, query_lower))
        return ranked[:MAX_SUGGESTIONS]

    # ═══════════════ RECENT SEARCHES ═══════════════

    async def recent(self, user_id: str, limit: int = 10) -> list[RecentSearch]:
        """Most recent distinct queries of a user, newest first."""
        if not user_id:
            raise SearchValidationError("userId", "userId is required")
        validate_pagination(limit, 0)

        docs = await self._list(
            self.collections.search_history,
            [
                Predicate.equal("userId", user_id),
                Predicate.order_desc("timestamp"),
                Predicate.limit(RECENT_SCAN_LIMIT),
            ],
        )

        unique: dict[str, RecentSearch] = {}
        for doc in docs:
            query = doc.get("query", "")
            if query in unique:
                continue
            unique[query] = RecentSearch(
                query=query,
                timestamp=doc.get("timestamp", ""),
                result_count=doc.get("resultCount") or 0,
            )
            if len(unique) >= limit:
                break
        return list(unique.values())

    # ═══════════════ QUICK SEARCH ═══════════════

    async def quick_search(
        self,
        search_type: QuickSearchType,
        user_id: str,
        user_role: str | None = None,
        user_department: str | None = None,
        limit: int = 25,
        offset: int = 0,
    ) -> SearchResponse:
        """Preset listings: every result scores QUICK_SEARCH_SCORE."""
        if search_type not in QUICK_SEARCH_TYPES:
            raise SearchValidationError("type", f"Invalid search type: {search_type!r}")
        validate_pagination(limit, offset)

        predicates: list[Predicate] = []
        if search_type == "all-contracts":
            if user_role not in UNRESTRICTED_ROLES and user_department:
                predicates.append(Predicate.equal("department", user_department))
        elif search_type == "active":
            predicates.append(Predicate.equal("status", "active"))
        predicates.append(Predicate.limit(QUICK_SEARCH_FETCH_LIMIT))

        docs = await self._list(self.collections.contracts, predicates)

        if search_type == "departments":
            results = _group_results(docs, "department", "dept", "Department")
        elif search_type == "vendors":
            results = _group_results(docs, "vendor", "vendor", "Vendor")
        else:
            results = [_to_result("contract", doc, QUICK_SEARCH_SCORE) for doc in docs]

        total = len(results)
        logger.info(
            "Quick search | type=%s | user=%s | role=%s | total=%d",
            search_type, user_id, user_role or "-", total,
        )
        return SearchResponse(
            results=results[offset:offset + limit],
            total=total,
            query=search_type,
            filters=SearchFilters(),
            pagination=Pagination(limit=limit, offset=offset, has_more=offset + limit < total),
        )

    # ═══════════════ HELPERS ═══════════════

    async def _list(self, collection: str, predicates: list[Predicate]) -> list[dict[str, Any]]:
        try:
            result = await self.store.list_documents(collection, predicates)
        except Exception as e:
            logger.error("Fetch failed | collection=%s | %s", collection, str(e)[:200])
            raise UpstreamFetchError(collection, cause=e) from e
        return result.documents


def _to_result(kind: str, doc: dict[str, Any], score: int) -> SearchResult:
    if kind == "contract":
        name = _text(doc, "contractName") or _text(doc, "name") or "Untitled Contract"
    else:
        name = _text(doc, "name") or "Untitled File"

    amount = doc.get("amount")
    managers = doc.get("assignedManagers")
    return SearchResult(
        id=str(doc.get("$id", "")),
        type=kind,
        name=name,
        contract_name=_text(doc, "contractName"),
        vendor=_text(doc, "vendor"),
        department=_text(doc, "department"),
        status=_text(doc, "status"),
        priority=_text(doc, "priority"),
        amount=amount if isinstance(amount, (int, float)) and not isinstance(amount, bool) else None,
        contract_expiry_date=_text(doc, "contractExpiryDate"),
        assigned_managers=[m for m in managers if isinstance(m, str)] if isinstance(managers, list) else None,
        contract_type=_text(doc, "contractType"),
        created_at=_text(doc, "$createdAt"),
        updated_at=_text(doc, "$updatedAt"),
        search_score=score,
    )


def _group_results(
    docs: list[dict[str, Any]], field: str, id_prefix: str, label: str,
) -> list[SearchResult]:
    """One result per distinct value of field; the first document seen wins."""
    grouped: dict[str, SearchResult] = {}
    for doc in docs:
        value = _text(doc, field)
        if not value or value in grouped:
            continue
        grouped[value] = SearchResult(
            id=f"{id_prefix}-{value}",
            type=field,
            name=value,
            vendor=value if field == "vendor" else None,
            department=_text(doc, "department"),
            contract_type=label,
            created_at=_text(doc, "$createdAt"),
            updated_at=_text(doc, "$updatedAt"),
            search_score=QUICK_SEARCH_SCORE,
        )
    return list(grouped.values())


def _text(doc: dict[str, Any], field: str) -> str | None:
    value = doc.get(field)
    return value if isinstance(value, str) and value else None


def _created_ts(result: SearchResult) -> datetime:
    return parse_timestamp(result.created_at) or EPOCH


def _add_suggestion(found: dict[str, None], value: Any, query_lower: str) -> None:
    if isinstance(value, str) and value and query_lower in value.lower():
        found[value] = None


def _suggestion_rank(suggestion: str, query_lower: str) -> tuple[int, int]:
    lower = suggestion.lower()
    if lower == query_lower:
        tier = 0
    elif lower.startswith(query_lower):
        tier = 1
    else:
        tier = 2
    return tier, len(suggestion)
