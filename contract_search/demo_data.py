"""Demo/mock records served when no Appwrite API key is configured."""

from contract_search.search.collections import CollectionIds
from contract_search.storage.memory import MemoryStore

DEMO_CONTRACTS = [
    {
        "$id": "demo-contract-1",
        "contractName": "Acme IT Services Agreement",
        "contractNumber": "CT-2024-001",
        "vendor": "Acme Corp",
        "department": "IT",
        "status": "active",
        "priority": "High",
        "contractType": "Service",
        "amount": 120000,
        "contractExpiryDate": "2026-12-31T00:00:00.000+00:00",
        "assignedManagers": ["jane.doe", "sam.lee"],
        "compliance": "SOC2",
        "description": "Managed IT services and helpdesk support",
        "$createdAt": "2024-01-15T09:00:00.000+00:00",
        "$updatedAt": "2024-02-01T09:00:00.000+00:00",
    },
    {
        "$id": "demo-contract-2",
        "contractName": "Office Lease, Main Campus",
        "contractNumber": "CT-2024-014",
        "vendor": "Beta Properties LLC",
        "department": "Operations",
        "status": "active",
        "priority": "Medium",
        "contractType": "Lease",
        "amount": 480000,
        "contractExpiryDate": "2029-06-30T00:00:00.000+00:00",
        "assignedManagers": ["maria.garcia"],
        "$createdAt": "2024-03-02T14:30:00.000+00:00",
        "$updatedAt": "2024-03-02T14:30:00.000+00:00",
    },
    {
        "$id": "demo-contract-3",
        "contractName": "Payroll Processing",
        "contractNumber": "CT-2023-077",
        "vendor": "PayServe Inc",
        "department": "Finance",
        "status": "expired",
        "priority": "Low",
        "contractType": "Service",
        "amount": 36000,
        "contractExpiryDate": "2024-05-31T00:00:00.000+00:00",
        "assignedManagers": ["sam.lee"],
        "compliance": "HIPAA",
        "$createdAt": "2023-06-01T08:00:00.000+00:00",
        "$updatedAt": "2024-06-01T08:00:00.000+00:00",
    },
    {
        "$id": "demo-contract-4",
        "contractName": "Legal Counsel Retainer",
        "contractNumber": "CT-2024-031",
        "vendor": "Acme Legal Partners",
        "department": "Legal",
        "status": "pending",
        "priority": "Critical",
        "contractType": "Retainer",
        "amount": 75000,
        "$createdAt": "2024-05-20T10:15:00.000+00:00",
        "$updatedAt": "2024-05-20T10:15:00.000+00:00",
    },
]

DEMO_FILES = [
    {
        "$id": "demo-file-1",
        "name": "acme-msa-signed.pdf",
        "contractName": "Acme IT Services Agreement",
        "department": "IT",
        "$createdAt": "2024-01-16T11:00:00.000+00:00",
        "$updatedAt": "2024-01-16T11:00:00.000+00:00",
    },
    {
        "$id": "demo-file-2",
        "name": "lease-amendment-2024.docx",
        "department": "Operations",
        "$createdAt": "2024-04-10T16:45:00.000+00:00",
        "$updatedAt": "2024-04-10T16:45:00.000+00:00",
    },
]


def build_demo_store(collections: CollectionIds | None = None) -> MemoryStore:
    """In-memory store seeded with the demo contracts and files."""
    collections = collections or CollectionIds.from_settings()
    store = MemoryStore()
    store.add_documents(collections.contracts, DEMO_CONTRACTS)
    store.add_documents(collections.files, DEMO_FILES)
    return store
