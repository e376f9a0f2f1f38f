"""Async database engine and session management for search analytics.

Uses SQLAlchemy 2.0 async with asyncpg driver.
Graceful degradation: if PostgreSQL is unavailable, searches still work and
analytics writes are skipped.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from contract_search.config import settings

logger = logging.getLogger(__name__)

engine = create_async_engine(
    settings.database_url,
    echo=False,
    pool_size=5,
    max_overflow=10,
    pool_pre_ping=True,
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def init_db() -> bool:
    """Create tables if they don't exist. Returns True on success."""
    from contract_search.models import Base  # noqa: F811

    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database initialized successfully")
        return True
    except Exception as e:
        logger.warning("Database unavailable, continuing without analytics: %s", str(e)[:200])
        return False


async def close_db():
    """Dispose engine connections on shutdown."""
    await engine.dispose()
    logger.info("Database connections closed")
