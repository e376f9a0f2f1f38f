"""Tests for the in-process MemoryStore."""

from datetime import datetime, timezone

import pytest

from contract_search.storage.base import DocumentNotFound, Predicate
from contract_search.storage.memory import DEFAULT_PAGE_SIZE, MemoryStore


@pytest.fixture
def mem():
    s = MemoryStore(clock=lambda: datetime(2025, 5, 1, tzinfo=timezone.utc))
    s.add_documents("docs", [
        {"$id": "a", "amount": 10, "tags": ["x", "y"], "when": "2024-01-01T00:00:00.000+00:00", "label": "b"},
        {"$id": "b", "amount": 30, "tags": ["z"], "when": "2024-06-01T00:00:00.000+00:00", "label": "a"},
        {"$id": "c", "amount": 20, "when": "2024-03-01T00:00:00.000+00:00", "label": "c"},
    ])
    return s


async def _ids(store, predicates):
    return [d["$id"] for d in (await store.list_documents("docs", predicates)).documents]


class TestFiltering:
    @pytest.mark.asyncio
    async def test_equal_scalar(self, mem):
        assert await _ids(mem, [Predicate.equal("label", "a")]) == ["b"]

    @pytest.mark.asyncio
    async def test_equal_any_of(self, mem):
        assert await _ids(mem, [Predicate.equal("label", ["a", "c"])]) == ["b", "c"]

    @pytest.mark.asyncio
    async def test_equal_on_list_attribute(self, mem):
        assert await _ids(mem, [Predicate.equal("tags", ["y", "q"])]) == ["a"]

    @pytest.mark.asyncio
    async def test_numeric_range(self, mem):
        predicates = [Predicate.greater_than_equal("amount", 10), Predicate.less_than_equal("amount", 20)]
        assert await _ids(mem, predicates) == ["a", "c"]

    @pytest.mark.asyncio
    async def test_date_range_mixed_offsets(self, mem):
        predicates = [Predicate.greater_than_equal("when", "2024-02-29T23:00:00-02:00")]
        assert await _ids(mem, predicates) == ["b"]

    @pytest.mark.asyncio
    async def test_missing_attribute_excluded(self, mem):
        assert await _ids(mem, [Predicate.equal("tags", ["z", "x"])]) == ["a", "b"]

    @pytest.mark.asyncio
    async def test_incomparable_excluded(self, mem):
        assert await _ids(mem, [Predicate.greater_than_equal("amount", "ten")]) == []


class TestOrderingAndLimits:
    @pytest.mark.asyncio
    async def test_order_desc(self, mem):
        assert await _ids(mem, [Predicate.order_desc("amount")]) == ["b", "c", "a"]

    @pytest.mark.asyncio
    async def test_order_asc_dates(self, mem):
        assert await _ids(mem, [Predicate.order_asc("when")]) == ["a", "c", "b"]

    @pytest.mark.asyncio
    async def test_missing_sort_value_last(self, mem):
        ids = await _ids(mem, [Predicate.order_asc("tags")])
        assert ids[-1] == "c"

    @pytest.mark.asyncio
    async def test_limit_and_total(self, mem):
        result = await mem.list_documents("docs", [Predicate.order_asc("amount"), Predicate.limit(2)])
        assert [d["$id"] for d in result.documents] == ["a", "c"]
        assert result.total == 3

    @pytest.mark.asyncio
    async def test_default_page_size(self):
        s = MemoryStore()
        s.add_documents("many", [{"n": i} for i in range(DEFAULT_PAGE_SIZE + 5)])
        result = await s.list_documents("many")
        assert len(result.documents) == DEFAULT_PAGE_SIZE
        assert result.total == DEFAULT_PAGE_SIZE + 5

    @pytest.mark.asyncio
    async def test_unknown_collection_empty(self, mem):
        result = await mem.list_documents("nothing")
        assert result.documents == []
        assert result.total == 0


class TestDocuments:
    @pytest.mark.asyncio
    async def test_create_sets_system_attributes(self, mem):
        doc = await mem.create_document("docs", "new", {"label": "n"})
        assert doc["$id"] == "new"
        assert doc["$collectionId"] == "docs"
        assert doc["$createdAt"] == "2025-05-01T00:00:00.000+00:00"
        assert doc["$updatedAt"] == doc["$createdAt"]
        assert mem.count("docs") == 4

    @pytest.mark.asyncio
    async def test_get(self, mem):
        doc = await mem.get_document("docs", "a")
        assert doc["amount"] == 10

    @pytest.mark.asyncio
    async def test_returned_documents_are_copies(self, mem):
        doc = await mem.get_document("docs", "a")
        doc["tags"].append("mutated")
        assert (await mem.get_document("docs", "a"))["tags"] == ["x", "y"]

    @pytest.mark.asyncio
    async def test_get_missing(self, mem):
        with pytest.raises(DocumentNotFound) as exc:
            await mem.get_document("docs", "zzz")
        assert exc.value.status_code == 404

    @pytest.mark.asyncio
    async def test_delete(self, mem):
        await mem.delete_document("docs", "a")
        assert mem.count("docs") == 2
        with pytest.raises(DocumentNotFound):
            await mem.delete_document("docs", "a")

    def test_seeded_system_attributes_kept(self):
        s = MemoryStore()
        s.add_documents("x", [{"$id": "keep", "$createdAt": "2020-01-01T00:00:00.000+00:00"}])
        stored = s._collections["x"]["keep"]
        assert stored["$createdAt"] == "2020-01-01T00:00:00.000+00:00"
        assert stored["$updatedAt"] == "2020-01-01T00:00:00.000+00:00"
