"""Shared test fixtures and configuration."""

import os
from datetime import datetime, timedelta, timezone

import pytest

# Ensure we're in demo mode during tests (no real backend, no analytics DB)
os.environ.setdefault("APPWRITE_API_KEY", "")
os.environ.setdefault("ANALYTICS_ENABLED", "false")

from contract_search.search.collections import CollectionIds  # noqa: E402
from contract_search.search.engine import SearchEngine  # noqa: E402
from contract_search.search.saved import SavedSearchService  # noqa: E402
from contract_search.storage.memory import MemoryStore  # noqa: E402


class TickingClock:
    """Deterministic clock; every call is one step later than the previous."""

    def __init__(self, start: datetime | None = None, step: timedelta = timedelta(seconds=1)):
        self.current = start or datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)
        self.step = step

    def __call__(self) -> datetime:
        value = self.current
        self.current += self.step
        return value


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def collections():
    return CollectionIds()


@pytest.fixture
def sample_contracts():
    return [
        {
            "$id": "c1",
            "contractName": "Acme IT Services",
            "vendor": "Acme Corp",
            "department": "IT",
            "status": "active",
            "priority": "High",
            "contractType": "Service",
            "amount": 5000,
            "contractExpiryDate": "2025-06-30T00:00:00.000+00:00",
            "assignedManagers": ["alice", "bob"],
            "compliance": "SOC2",
            "$createdAt": "2024-01-01T10:00:00.000+00:00",
            "$updatedAt": "2024-01-02T10:00:00.000+00:00",
        },
        {
            "$id": "c2",
            "contractName": "Beta Vendor Deal",
            "vendor": "Beta LLC",
            "department": "IT",
            "status": "pending",
            "priority": "Low",
            "contractType": "Lease",
            "amount": 20000,
            "contractExpiryDate": "2026-01-31T00:00:00.000+00:00",
            "assignedManagers": ["carol"],
            "$createdAt": "2024-02-01T00:00:00.000+00:00",
            "$updatedAt": "2024-02-01T00:00:00.000+00:00",
        },
        {
            "$id": "c3",
            "contractName": "Gamma Consulting",
            "contractNumber": "FIN-0042",
            "vendor": "Gamma Partners",
            "department": "Finance",
            "status": "active",
            "priority": "Medium",
            "contractType": "Consulting",
            "amount": 12000.5,
            "description": "Quarterly audit support",
            "$createdAt": "2024-03-01T00:00:00.000+00:00",
            "$updatedAt": "2024-03-05T00:00:00.000+00:00",
        },
    ]


@pytest.fixture
def sample_files():
    return [
        {
            "$id": "f1",
            "name": "acme-invoice.pdf",
            "department": "Finance",
            "$createdAt": "2024-01-15T00:00:00.000+00:00",
            "$updatedAt": "2024-01-15T00:00:00.000+00:00",
        },
        {
            "$id": "f2",
            "name": "it-policy.docx",
            "department": "IT",
            "$createdAt": "2024-02-15T00:00:00.000+00:00",
            "$updatedAt": "2024-02-15T00:00:00.000+00:00",
        },
    ]


@pytest.fixture
def store(collections, sample_contracts, sample_files, clock):
    s = MemoryStore(clock=clock)
    s.add_documents(collections.contracts, sample_contracts)
    s.add_documents(collections.files, sample_files)
    return s


@pytest.fixture
def engine(store, collections, clock):
    return SearchEngine(store, collections, clock=clock)


@pytest.fixture
def saved_service(store, collections, clock):
    return SavedSearchService(store, collections, clock=clock)
