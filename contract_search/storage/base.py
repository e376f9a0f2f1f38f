"""Record storage interface.

Mirrors the document API of the hosted backend: list with predicates, get,
create and delete. Predicates follow the backend's query vocabulary so the
same list can be serialized for the REST API or evaluated in memory.
"""

import json
from abc import ABC, abstractmethod
from typing import Any, Literal

from pydantic import BaseModel, Field

Method = Literal["equal", "greaterThanEqual", "lessThanEqual", "orderAsc", "orderDesc", "limit"]


class StorageError(Exception):
    """Raised by a store when a request to the backend fails."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class DocumentNotFound(StorageError):
    """Raised by get/delete when the document does not exist."""

    def __init__(self, collection: str, document_id: str):
        super().__init__(f"Document '{document_id}' not found in '{collection}'", status_code=404)
        self.collection = collection
        self.document_id = document_id


class Predicate(BaseModel):
    """A single query clause: filter, ordering or page size."""

    method: Method
    attribute: str | None = None
    values: list[Any] = Field(default_factory=list)

    @classmethod
    def equal(cls, attribute: str, value: Any) -> "Predicate":
        values = list(value) if isinstance(value, (list, tuple, set)) else [value]
        return cls(method="equal", attribute=attribute, values=values)

    @classmethod
    def greater_than_equal(cls, attribute: str, value: Any) -> "Predicate":
        return cls(method="greaterThanEqual", attribute=attribute, values=[value])

    @classmethod
    def less_than_equal(cls, attribute: str, value: Any) -> "Predicate":
        return cls(method="lessThanEqual", attribute=attribute, values=[value])

    @classmethod
    def order_asc(cls, attribute: str) -> "Predicate":
        return cls(method="orderAsc", attribute=attribute)

    @classmethod
    def order_desc(cls, attribute: str) -> "Predicate":
        return cls(method="orderDesc", attribute=attribute)

    @classmethod
    def limit(cls, n: int) -> "Predicate":
        return cls(method="limit", values=[n])

    def to_query_string(self) -> str:
        """Serialize in the backend's JSON query format."""
        data: dict[str, Any] = {"method": self.method}
        if self.attribute is not None:
            data["attribute"] = self.attribute
        if self.values:
            data["values"] = self.values
        return json.dumps(data, separators=(",", ":"))


class DocumentList(BaseModel):
    documents: list[dict[str, Any]] = Field(default_factory=list)
    total: int = 0


class RecordStore(ABC):
    """Async document storage used by the search engine."""

    @abstractmethod
    async def list_documents(
        self, collection: str, predicates: list[Predicate] | None = None,
    ) -> DocumentList:
        """Return documents matching every filter predicate."""

    @abstractmethod
    async def get_document(self, collection: str, document_id: str) -> dict[str, Any]:
        """Return one document or raise DocumentNotFound."""

    @abstractmethod
    async def create_document(
        self, collection: str, document_id: str, data: dict[str, Any],
    ) -> dict[str, Any]:
        """Create a document and return it with its system attributes."""

    @abstractmethod
    async def delete_document(self, collection: str, document_id: str) -> None:
        """Delete a document or raise DocumentNotFound."""
