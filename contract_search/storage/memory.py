"""In-process record store.

Evaluates the same predicates as the hosted backend. Used in demo mode and
by the test-suite. Not shared between processes.
"""

import copy
import logging
import uuid
from collections import defaultdict
from datetime import datetime
from typing import Any, Callable

from contract_search.storage.base import (
    DocumentList,
    DocumentNotFound,
    Predicate,
    RecordStore,
)
from contract_search.utils.timestamps import parse_timestamp, to_iso, utc_now

logger = logging.getLogger(__name__)

# Backend default page size when no limit predicate is given
DEFAULT_PAGE_SIZE = 25


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _comparable(a: Any, b: Any) -> tuple[Any, Any] | None:
    """Coerce two values to a comparable pair, or None when they can't be compared."""
    if _is_number(a) and _is_number(b):
        return a, b
    if isinstance(a, str) and isinstance(b, str):
        ta, tb = parse_timestamp(a), parse_timestamp(b)
        if ta and tb:
            return ta, tb
        return a, b
    return None


def _sort_key(value: Any) -> tuple:
    if _is_number(value):
        return (0, float(value))
    ts = parse_timestamp(value)
    if ts:
        return (1, ts.timestamp())
    return (2, str(value))


def _matches(doc: dict[str, Any], predicate: Predicate) -> bool:
    value = doc.get(predicate.attribute)
    if value is None:
        return False

    if predicate.method == "equal":
        if isinstance(value, list):
            return any(v in predicate.values for v in value)
        return value in predicate.values

    pair = _comparable(value, predicate.values[0])
    if pair is None:
        return False
    left, right = pair
    if predicate.method == "greaterThanEqual":
        return left >= right
    return left <= right


class MemoryStore(RecordStore):
    """Dict-backed store keyed by collection id."""

    def __init__(self, clock: Callable[[], datetime] = utc_now):
        self._clock = clock
        self._collections: dict[str, dict[str, dict[str, Any]]] = defaultdict(dict)

    def add_documents(self, collection: str, documents: list[dict[str, Any]]) -> None:
        """Seed documents, keeping any system attributes they already carry."""
        for doc in documents:
            stored = copy.deepcopy(doc)
            now = to_iso(self._clock())
            stored.setdefault("$id", uuid.uuid4().hex)
            stored.setdefault("$createdAt", now)
            stored.setdefault("$updatedAt", stored["$createdAt"])
            stored["$collectionId"] = collection
            self._collections[collection][stored["$id"]] = stored

    def count(self, collection: str) -> int:
        return len(self._collections[collection])

    async def list_documents(
        self, collection: str, predicates: list[Predicate] | None = None,
    ) -> DocumentList:
        predicates = predicates or []
        filters = [p for p in predicates if p.attribute and p.method in ("equal", "greaterThanEqual", "lessThanEqual")]
        orders = [p for p in predicates if p.method in ("orderAsc", "orderDesc")]
        limits = [p for p in predicates if p.method == "limit"]

        docs = [
            d for d in self._collections[collection].values()
            if all(_matches(d, p) for p in filters)
        ]

        # Apply orderings last-to-first so the first one is the primary key
        for order in reversed(orders):
            present = [d for d in docs if d.get(order.attribute) is not None]
            missing = [d for d in docs if d.get(order.attribute) is None]
            present.sort(
                key=lambda d: _sort_key(d[order.attribute]),
                reverse=order.method == "orderDesc",
            )
            docs = present + missing

        page_size = limits[-1].values[0] if limits else DEFAULT_PAGE_SIZE
        logger.debug(
            "MemoryStore list | collection=%s | matched=%d | limit=%d",
            collection, len(docs), page_size,
        )
        return DocumentList(
            documents=[copy.deepcopy(d) for d in docs[:page_size]],
            total=len(docs),
        )

    async def get_document(self, collection: str, document_id: str) -> dict[str, Any]:
        doc = self._collections[collection].get(document_id)
        if doc is None:
            raise DocumentNotFound(collection, document_id)
        return copy.deepcopy(doc)

    async def create_document(
        self, collection: str, document_id: str, data: dict[str, Any],
    ) -> dict[str, Any]:
        now = to_iso(self._clock())
        doc = {
            **copy.deepcopy(data),
            "$id": document_id,
            "$collectionId": collection,
            "$createdAt": now,
            "$updatedAt": now,
        }
        self._collections[collection][document_id] = doc
        return copy.deepcopy(doc)

    async def delete_document(self, collection: str, document_id: str) -> None:
        if document_id not in self._collections[collection]:
            raise DocumentNotFound(collection, document_id)
        del self._collections[collection][document_id]
