"""SearchAnalytics model: one row per executed search, for usage analytics."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from contract_search.models.base import Base


class SearchAnalytics(Base):
    """Persistent log of search telemetry: query, filters, result count, duration."""

    __tablename__ = "search_analytics"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    user_id: Mapped[str] = mapped_column(
        String(64), nullable=False, index=True,
    )
    query: Mapped[str] = mapped_column(String(500), nullable=False)
    filters: Mapped[dict] = mapped_column(JSONB, nullable=False, insert_default=lambda: {})
    result_count: Mapped[int] = mapped_column(Integer, nullable=False, insert_default=0)
    search_time_ms: Mapped[int] = mapped_column(Integer, nullable=False, insert_default=0)
    user_agent: Mapped[str] = mapped_column(String(300), nullable=False, insert_default="")
    client_ip_hash: Mapped[str] = mapped_column(String(64), nullable=False, insert_default="")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
        default=lambda: datetime.now(timezone.utc),
    )
