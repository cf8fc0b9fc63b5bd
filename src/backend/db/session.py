"""
Async SQLAlchemy engine and session management.

The engine is created lazily from settings so tests and scripts can point
DATABASE_URL somewhere else before the first connection.
"""

from typing import AsyncGenerator

import structlog
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from core.config import settings
from db.base import Base

logger = structlog.get_logger(__name__)

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def get_engine() -> AsyncEngine:
    """Get or create the async engine."""
    global _engine
    if _engine is None:
        url = settings.database_url
        kwargs: dict = {"echo": settings.DB_ECHO, "pool_pre_ping": True}
        if not url.startswith("sqlite"):
            kwargs["pool_size"] = settings.DB_POOL_SIZE
        _engine = create_async_engine(url, **kwargs)
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get or create the session factory bound to the engine."""
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(
            get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
        )
    return _session_factory


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency yielding one session per request.

    Commits when the handler returns, rolls back when it raises.
    """
    async with get_session_factory()() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db(create_tables: bool = False) -> None:
    """Open the engine and optionally create tables (local development)."""
    import models  # noqa: F401  registers all mappers on Base.metadata

    engine = get_engine()
    if create_tables:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("database_tables_created")


async def close_db() -> None:
    """Dispose the engine and its connection pool."""
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
        logger.info("database_connections_closed")
    _engine = None
    _session_factory = None
