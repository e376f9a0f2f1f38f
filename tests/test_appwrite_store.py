"""Tests for the Appwrite REST integration: httpx.MockTransport, no network."""

import json

import httpx
import pytest

from contract_search.storage.appwrite import AppwriteStore
from contract_search.storage.base import DocumentNotFound, Predicate, StorageError


def _store(handler) -> AppwriteStore:
    return AppwriteStore(
        endpoint="https://appwrite.test/v1/",
        project_id="proj",
        api_key="secret",
        database_id="db",
        transport=httpx.MockTransport(handler),
    )


class TestPredicateSerialization:
    def test_equal(self):
        assert Predicate.equal("department", "IT").to_query_string() == (
            '{"method":"equal","attribute":"department","values":["IT"]}'
        )

    def test_equal_many(self):
        assert Predicate.equal("compliance", ["SOC2", "HIPAA"]).values == ["SOC2", "HIPAA"]

    def test_range(self):
        assert Predicate.greater_than_equal("amount", 1000).to_query_string() == (
            '{"method":"greaterThanEqual","attribute":"amount","values":[1000]}'
        )

    def test_order(self):
        assert Predicate.order_desc("$createdAt").to_query_string() == (
            '{"method":"orderDesc","attribute":"$createdAt"}'
        )

    def test_limit(self):
        assert Predicate.limit(200).to_query_string() == '{"method":"limit","values":[200]}'


class TestAppwriteStore:
    @pytest.mark.asyncio
    async def test_list_documents(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["path"] = request.url.path
            seen["queries"] = request.url.params.get_list("queries[]")
            seen["headers"] = request.headers
            return httpx.Response(200, json={
                "total": 1,
                "documents": [{"$id": "c1", "contractName": "Acme"}],
            })

        store = _store(handler)
        result = await store.list_documents(
            "contracts", [Predicate.equal("status", "active"), Predicate.limit(5)],
        )

        assert result.total == 1
        assert result.documents[0]["$id"] == "c1"
        assert seen["method"] == "GET"
        assert seen["path"] == "/v1/databases/db/collections/contracts/documents"
        assert [json.loads(q) for q in seen["queries"]] == [
            {"method": "equal", "attribute": "status", "values": ["active"]},
            {"method": "limit", "values": [5]},
        ]
        assert seen["headers"]["X-Appwrite-Project"] == "proj"
        assert seen["headers"]["X-Appwrite-Key"] == "secret"

    @pytest.mark.asyncio
    async def test_get_document(self):
        def handler(request):
            assert request.url.path.endswith("/collections/files/documents/f1")
            return httpx.Response(200, json={"$id": "f1", "name": "a.pdf"})

        doc = await _store(handler).get_document("files", "f1")
        assert doc["name"] == "a.pdf"

    @pytest.mark.asyncio
    async def test_get_missing(self):
        def handler(request):
            return httpx.Response(404, json={"message": "Document not found", "code": 404})

        with pytest.raises(DocumentNotFound) as exc:
            await _store(handler).get_document("files", "nope")
        assert exc.value.document_id == "nope"

    @pytest.mark.asyncio
    async def test_create_document(self):
        seen = {}

        def handler(request):
            seen["method"] = request.method
            seen["body"] = json.loads(request.content)
            return httpx.Response(201, json={"$id": "h1", **seen["body"]["data"]})

        doc = await _store(handler).create_document("search_history", "h1", {"query": "acme"})
        assert seen["method"] == "POST"
        assert seen["body"] == {"documentId": "h1", "data": {"query": "acme"}}
        assert doc["query"] == "acme"

    @pytest.mark.asyncio
    async def test_delete_document(self):
        seen = {}

        def handler(request):
            seen["method"] = request.method
            return httpx.Response(204)

        await _store(handler).delete_document("saved_searches", "s1")
        assert seen["method"] == "DELETE"

    @pytest.mark.asyncio
    async def test_conflict_keeps_status(self):
        def handler(request):
            return httpx.Response(409, json={"message": "Document already exists"})

        with pytest.raises(StorageError) as exc:
            await _store(handler).create_document("saved_searches", "s1", {})
        assert exc.value.status_code == 409
        assert str(exc.value) == "Document already exists"

    @pytest.mark.asyncio
    async def test_server_error(self):
        def handler(request):
            return httpx.Response(500, text="oops")

        with pytest.raises(StorageError) as exc:
            await _store(handler).list_documents("contracts")
        assert exc.value.status_code == 500
        assert str(exc.value) == "HTTP 500"

    @pytest.mark.asyncio
    async def test_list_404_is_not_document_not_found(self):
        def handler(request):
            return httpx.Response(404, json={"message": "Collection not found"})

        with pytest.raises(StorageError) as exc:
            await _store(handler).list_documents("missing")
        assert not isinstance(exc.value, DocumentNotFound)

    @pytest.mark.asyncio
    async def test_timeout(self):
        def handler(request):
            raise httpx.ConnectTimeout("timed out", request=request)

        with pytest.raises(StorageError) as exc:
            await _store(handler).list_documents("contracts")
        assert "Timeout" in str(exc.value)

    @pytest.mark.asyncio
    async def test_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(StorageError):
            await _store(handler).list_documents("contracts")
