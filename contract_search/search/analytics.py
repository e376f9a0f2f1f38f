"""Search analytics: best-effort telemetry writes and per-user summaries."""

import logging
from collections import Counter
from datetime import datetime, timedelta
from typing import Any, Iterable

from sqlalchemy import select

from contract_search.database import async_session_factory
from contract_search.models.search_analytics import SearchAnalytics
from contract_search.schemas import (
    AnalyticsRecentSearch,
    AnalyticsSummary,
    FilterCount,
    QueryCount,
)
from contract_search.utils.timestamps import to_iso, utc_now

logger = logging.getLogger(__name__)

TOP_N = 10
SUMMARY_RECENT_LIMIT = 20


async def record_search_event(
    user_id: str,
    query: str,
    filters: dict[str, Any],
    result_count: int,
    search_time_ms: int,
    user_agent: str = "",
    client_ip_hash: str = "",
):
    """Fire-and-forget background task to log a search to the analytics table."""
    try:
        async with async_session_factory() as session:
            session.add(SearchAnalytics(
                user_id=user_id,
                query=query.strip()[:500],
                filters=filters,
                result_count=result_count,
                search_time_ms=search_time_ms,
                user_agent=user_agent[:300],
                client_ip_hash=client_ip_hash,
            ))
            await session.commit()
    except Exception as e:
        logger.debug("Search analytics logging skipped: %s", str(e)[:100])


async def load_search_analytics(
    user_id: str,
    days: int = 30,
    limit: int = 100,
    now: datetime | None = None,
) -> list[SearchAnalytics]:
    """Events of a user inside the last `days`, newest first."""
    end = now or utc_now()
    start = end - timedelta(days=days)
    stmt = (
        select(SearchAnalytics)
        .where(
            SearchAnalytics.user_id == user_id,
            SearchAnalytics.created_at >= start,
            SearchAnalytics.created_at <= end,
        )
        .order_by(SearchAnalytics.created_at.desc())
        .limit(limit)
    )
    async with async_session_factory() as session:
        result = await session.execute(stmt)
        return list(result.scalars().all())


def summarize_analytics(events: Iterable[SearchAnalytics]) -> AnalyticsSummary:
    """Totals, average duration, most frequent queries and most used filters."""
    events = list(events)
    query_counts: Counter[str] = Counter()
    filter_counts: Counter[str] = Counter()
    total_time = 0

    for event in events:
        total_time += event.search_time_ms or 0
        query_counts[(event.query or "").lower().strip()] += 1
        for key, value in (event.filters or {}).items():
            if value:
                filter_counts[key] += 1

    total = len(events)
    return AnalyticsSummary(
        total_searches=total,
        average_search_time=total_time / total if total else 0.0,
        top_searches=[QueryCount(query=q, count=c) for q, c in _top(query_counts)],
        top_filters=[FilterCount(filter=f, count=c) for f, c in _top(filter_counts)],
        recent_searches=[
            AnalyticsRecentSearch(
                query=event.query or "",
                filters=event.filters or {},
                result_count=event.result_count or 0,
                search_time=event.search_time_ms or 0,
                timestamp=to_iso(event.created_at) if event.created_at else "",
            )
            for event in events[:SUMMARY_RECENT_LIMIT]
        ],
    )


def _top(counts: Counter) -> list[tuple[str, int]]:
    # Ties keep first-seen order
    return sorted(counts.items(), key=lambda kv: kv[1], reverse=True)[:TOP_N]
