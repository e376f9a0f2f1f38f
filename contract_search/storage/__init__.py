"""Record stores: hosted backend client and in-memory implementation."""

from contract_search.storage.appwrite import AppwriteStore
from contract_search.storage.base import (
    DocumentList,
    DocumentNotFound,
    Predicate,
    RecordStore,
    StorageError,
)
from contract_search.storage.memory import MemoryStore

__all__ = [
    "AppwriteStore",
    "DocumentList",
    "DocumentNotFound",
    "MemoryStore",
    "Predicate",
    "RecordStore",
    "StorageError",
]
