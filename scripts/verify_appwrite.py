#!/usr/bin/env python3
"""Real backend verification script: run against a live Appwrite project.

Usage:
  1. Fill in APPWRITE_PROJECT_ID, APPWRITE_API_KEY and APPWRITE_DATABASE_ID in .env
  2. Run: python scripts/verify_appwrite.py

Steps:
  Step 1: Verify .env configuration
  Step 2: List contracts and files (read access)
  Step 3: Full advanced search (no history write)
  Step 4: Suggestions
"""

import asyncio
import sys


def step_header(n: int, title: str) -> None:
    print(f"\n{'='*60}")
    print(f"  Step {n}: {title}")
    print(f"{'='*60}\n")


def ok(msg: str) -> None:
    print(f"  ✅ {msg}")


def fail(msg: str) -> None:
    print(f"  ❌ {msg}")


def info(msg: str) -> None:
    print(f"  ℹ️  {msg}")


async def step1_verify_env():
    step_header(1, "Verify .env Configuration")
    from contract_search.config import settings

    if settings.appwrite_api_key:
        ok(f"APPWRITE_API_KEY: set ({settings.appwrite_api_key[:8]}...)")
    else:
        fail("APPWRITE_API_KEY: NOT SET, the service would run in demo mode")
        return False

    if not settings.appwrite_project_id or not settings.appwrite_database_id:
        fail("APPWRITE_PROJECT_ID / APPWRITE_DATABASE_ID: NOT SET")
        return False

    ok(f"Endpoint: {settings.appwrite_endpoint}")
    ok(f"Database: {settings.appwrite_database_id}")
    ok(f"Collections: {settings.contracts_collection_id}, {settings.files_collection_id}")
    return True


async def step2_list_collections(store, collections):
    step_header(2, "List contracts and files")
    from contract_search.storage.base import Predicate, StorageError

    passed = True
    for collection in (collections.contracts, collections.files):
        try:
            result = await store.list_documents(collection, [Predicate.limit(3)])
            ok(f"{collection}: {result.total} documents")
            for doc in result.documents:
                print(f"    - [{doc.get('$id')}] {doc.get('contractName') or doc.get('name', '')}")
        except StorageError as e:
            fail(f"{collection}: {e}")
            passed = False
    return passed


async def step3_search(engine):
    step_header(3, "Advanced search")
    from contract_search.errors import UpstreamFetchError

    info("Query: '' (filters only), limit=5")
    try:
        result = await engine.search("", "", limit=5)
    except UpstreamFetchError as e:
        fail(f"Search failed on '{e.collection}': {e.message}")
        return False

    ok(f"total={result.total} returned={len(result.results)} hasMore={result.pagination.has_more}")
    for r in result.results[:3]:
        print(f"    - [{r.type}] {r.name[:60]} (score={r.search_score})")
    return True


async def step4_suggestions(engine, query: str):
    step_header(4, "Suggestions")
    from contract_search.errors import UpstreamFetchError

    info(f"Query: '{query}'")
    try:
        found = await engine.suggest(query)
    except UpstreamFetchError as e:
        fail(f"Suggestions failed: {e.message}")
        return False
    ok(f"Got {len(found)} suggestions: {', '.join(found[:5])}")
    return True


async def main():
    print("\n📄 Contract Search: Appwrite Verification")
    print("=" * 60)

    results = {}

    results[1] = await step1_verify_env()
    if not results[1]:
        print("\n⚠️  Appwrite credentials are required. Fill in .env and re-run.\n")
        sys.exit(1)

    from contract_search.main import build_store
    from contract_search.search.collections import CollectionIds
    from contract_search.search.engine import SearchEngine

    store = build_store()
    collections = CollectionIds.from_settings()
    engine = SearchEngine(store, collections)

    results[2] = await step2_list_collections(store, collections)
    results[3] = await step3_search(engine)
    results[4] = await step4_suggestions(engine, sys.argv[1] if len(sys.argv) > 1 else "co")

    # Summary
    print(f"\n{'='*60}")
    print("  SUMMARY")
    print(f"{'='*60}")
    for step_n, passed in sorted(results.items()):
        status = "✅ PASS" if passed else "❌ FAIL"
        print(f"  Step {step_n}: {status}")

    total_passed = sum(1 for v in results.values() if v)
    print(f"\n  {total_passed}/{len(results)} steps passed")
    print(f"{'='*60}\n")

    sys.exit(0 if all(results.values()) else 1)


if __name__ == "__main__":
    asyncio.run(main())
