"""SQLAlchemy ORM models."""

from contract_search.models.base import Base
from contract_search.models.search_analytics import SearchAnalytics

__all__ = ["Base", "SearchAnalytics"]
