"""Saved searches: user-named (query, filters) pairs.

Names are unique per user; deletes are only allowed for the owner.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Any, Callable

from contract_search.errors import (
    DuplicateNameError,
    NotFoundError,
    SearchValidationError,
    UnauthorizedError,
    UpstreamFetchError,
)
from contract_search.schemas import SavedSearch, SearchFilters
from contract_search.search.collections import CollectionIds
from contract_search.search.filters import decode_filters, encode_filters, validate_filters
from contract_search.storage.base import DocumentNotFound, Predicate, RecordStore, StorageError
from contract_search.utils.timestamps import to_iso, utc_now

logger = logging.getLogger(__name__)

SAVED_SEARCH_LIST_LIMIT = 100


class SavedSearchService:
    def __init__(
        self,
        store: RecordStore,
        collections: CollectionIds | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.collections = collections or CollectionIds.from_settings()
        self._clock = clock

    @property
    def _collection(self) -> str:
        return self.collections.saved_searches

    async def save(
        self,
        user_id: str,
        name: str,
        query: str,
        filters: SearchFilters | None = None,
    ) -> SavedSearch:
        if not user_id:
            raise SearchValidationError("userId", "userId is required")
        if not name or not name.strip():
            raise SearchValidationError("name", "name is required")
        filters = filters or SearchFilters()
        validate_filters(filters)

        existing = await self._list([
            Predicate.equal("userId", user_id),
            Predicate.equal("name", name),
            Predicate.limit(1),
        ])
        if existing:
            raise DuplicateNameError(name)

        try:
            doc = await self.store.create_document(
                self._collection,
                uuid.uuid4().hex,
                {
                    "userId": user_id,
                    "name": name,
                    "query": query or "",
                    "filters": encode_filters(filters),
                    "createdAt": to_iso(self._clock()),
                },
            )
        except StorageError as e:
            # A unique index on (userId, name) rejects a concurrent duplicate
            if e.status_code == 409:
                raise DuplicateNameError(name) from e
            raise UpstreamFetchError(self._collection, cause=e) from e

        logger.info("Saved search created | user=%s | name=%s", user_id, name[:80])
        return _to_saved(doc)

    async def list(self, user_id: str) -> list[SavedSearch]:
        if not user_id:
            raise SearchValidationError("userId", "userId is required")
        docs = await self._list([
            Predicate.equal("userId", user_id),
            Predicate.order_desc("$createdAt"),
            Predicate.limit(SAVED_SEARCH_LIST_LIMIT),
        ])
        return [_to_saved(doc) for doc in docs]

    async def delete(self, search_id: str, user_id: str) -> None:
        try:
            doc = await self.store.get_document(self._collection, search_id)
        except DocumentNotFound as e:
            raise NotFoundError(f"Saved search '{search_id}' not found") from e
        except StorageError as e:
            raise UpstreamFetchError(self._collection, cause=e) from e

        if doc.get("userId") != user_id:
            logger.warning("Saved search delete refused | id=%s | user=%s", search_id, user_id)
            raise UnauthorizedError()

        try:
            await self.store.delete_document(self._collection, search_id)
        except DocumentNotFound as e:
            raise NotFoundError(f"Saved search '{search_id}' not found") from e
        except StorageError as e:
            raise UpstreamFetchError(self._collection, cause=e) from e
        logger.info("Saved search deleted | id=%s | user=%s", search_id, user_id)

    async def _list(self, predicates: list[Predicate]) -> list[dict[str, Any]]:
        try:
            result = await self.store.list_documents(self._collection, predicates)
        except StorageError as e:
            raise UpstreamFetchError(self._collection, cause=e) from e
        return result.documents


def _to_saved(doc: dict[str, Any]) -> SavedSearch:
    return SavedSearch(
        id=doc.get("$id", ""),
        user_id=doc.get("userId", ""),
        name=doc.get("name", ""),
        query=doc.get("query") or "",
        filters=decode_filters(doc.get("filters")),
        created_at=doc.get("createdAt") or doc.get("$createdAt", ""),
    )
