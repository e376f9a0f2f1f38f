"""Backend collection ids used by the search services."""

from pydantic import BaseModel

from contract_search.config import settings


class CollectionIds(BaseModel):
    contracts: str = "contracts"
    files: str = "files"
    search_history: str = "search_history"
    saved_searches: str = "saved_searches"

    @classmethod
    def from_settings(cls) -> "CollectionIds":
        return cls(
            contracts=settings.contracts_collection_id,
            files=settings.files_collection_id,
            search_history=settings.search_history_collection_id,
            saved_searches=settings.saved_searches_collection_id,
        )

    def for_kind(self, kind: str) -> str:
        return self.contracts if kind == "contract" else self.files
