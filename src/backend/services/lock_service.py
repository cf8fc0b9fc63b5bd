"""
Keyed Lock Service

Serializes work on one key (for example all vote mutations on a post).

Two layers:
- an in-process asyncio.Lock per key, created on demand and dropped when
  nobody holds or waits on it
- on PostgreSQL, a transaction-scoped advisory lock so several API
  replicas serialize on the same key; it is released at commit/rollback
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger(__name__)


class KeyedLockRegistry:
    """
    Registry of asyncio locks keyed by string.

    Usage:
        async with registry.hold("post-votes:123"):
            # exclusive for this key within the process
            ...
    """

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncGenerator[None, None]:
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        self._users[key] = self._users.get(key, 0) + 1

        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                del self._locks[key]

    def is_locked(self, key: str) -> bool:
        lock = self._locks.get(key)
        return lock is not None and lock.locked()

    def __len__(self) -> int:
        return len(self._locks)


def _dialect_name(db: AsyncSession) -> str:
    bind = getattr(db, "bind", None)
    dialect = getattr(bind, "dialect", None)
    return getattr(dialect, "name", "") or ""


async def acquire_advisory_lock(db: AsyncSession, key: str) -> bool:
    """
    Take a PostgreSQL transaction-scoped advisory lock on key.

    Blocks until granted. Returns False without doing anything on other
    dialects (SQLite serializes writers itself).
    """
    if _dialect_name(db) != "postgresql":
        return False

    await db.execute(text("SELECT pg_advisory_xact_lock(hashtext(:key))"), {"key": key})
    logger.debug("advisory_lock_acquired", key=key)
    return True


# Process-wide registry for vote mutations
vote_locks = KeyedLockRegistry()


def post_vote_lock_key(post_id: str) -> str:
    return f"post-votes:{post_id}"
