"""Appwrite Databases REST API integration.

Docs: https://appwrite.io/docs/references/cloud/server-rest/databases
"""

import logging
import time
from typing import Any

import httpx

from contract_search.storage.base import (
    DocumentList,
    DocumentNotFound,
    Predicate,
    RecordStore,
    StorageError,
)

logger = logging.getLogger(__name__)


class AppwriteStore(RecordStore):
    """Async client for the Appwrite document API."""

    def __init__(
        self,
        endpoint: str,
        project_id: str,
        api_key: str,
        database_id: str,
        timeout: int = 30,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.endpoint = endpoint.rstrip("/")
        self.project_id = project_id
        self.api_key = api_key
        self.database_id = database_id
        self.timeout = timeout
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "X-Appwrite-Project": self.project_id,
            "X-Appwrite-Key": self.api_key,
        }

    def _documents_url(self, collection: str) -> str:
        return f"{self.endpoint}/databases/{self.database_id}/collections/{collection}/documents"

    def _build_params(self, predicates: list[Predicate]) -> list[tuple[str, str]]:
        return [("queries[]", p.to_query_string()) for p in predicates]

    async def _request(
        self,
        method: str,
        url: str,
        collection: str,
        document_id: str | None = None,
        **kwargs: Any,
    ) -> httpx.Response:
        start = time.monotonic()
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, headers=self._headers(), transport=self._transport,
            ) as client:
                resp = await client.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            elapsed_ms = int((time.monotonic() - start) * 1000)
            logger.warning("Appwrite timeout | %s %s | %dms", method, collection, elapsed_ms)
            raise StorageError(f"Timeout after {elapsed_ms}ms") from e
        except httpx.HTTPError as e:
            elapsed_ms = int((time.monotonic() - start) * 1000)
            logger.error("Appwrite error | %s %s | %dms | %s", method, collection, elapsed_ms, str(e)[:200])
            raise StorageError(str(e)[:200]) from e

        elapsed_ms = int((time.monotonic() - start) * 1000)
        if resp.status_code == 404 and document_id is not None:
            raise DocumentNotFound(collection, document_id)
        if resp.status_code >= 400:
            logger.warning(
                "Appwrite | %s %s | status=%d | %dms | %s",
                method, collection, resp.status_code, elapsed_ms, resp.text[:200],
            )
            raise StorageError(_error_message(resp), status_code=resp.status_code)

        logger.debug("Appwrite OK | %s %s | %dms", method, collection, elapsed_ms)
        return resp

    async def list_documents(
        self, collection: str, predicates: list[Predicate] | None = None,
    ) -> DocumentList:
        resp = await self._request(
            "GET",
            self._documents_url(collection),
            collection,
            params=self._build_params(predicates or []),
        )
        data = resp.json()
        return DocumentList(
            documents=data.get("documents", []),
            total=data.get("total", 0),
        )

    async def get_document(self, collection: str, document_id: str) -> dict[str, Any]:
        resp = await self._request(
            "GET", f"{self._documents_url(collection)}/{document_id}", collection, document_id,
        )
        return resp.json()

    async def create_document(
        self, collection: str, document_id: str, data: dict[str, Any],
    ) -> dict[str, Any]:
        resp = await self._request(
            "POST",
            self._documents_url(collection),
            collection,
            json={"documentId": document_id, "data": data},
        )
        return resp.json()

    async def delete_document(self, collection: str, document_id: str) -> None:
        await self._request(
            "DELETE", f"{self._documents_url(collection)}/{document_id}", collection, document_id,
        )


def _error_message(resp: httpx.Response) -> str:
    try:
        return resp.json().get("message", "") or f"HTTP {resp.status_code}"
    except ValueError:
        return f"HTTP {resp.status_code}"
