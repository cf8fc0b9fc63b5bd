"""Request-scoped deadlines for storage work."""

import asyncio
from typing import Awaitable, TypeVar

import structlog

from core.config import settings
from core.exceptions import StorageTimeout

logger = structlog.get_logger(__name__)

T = TypeVar("T")


async def run_with_timeout(
    awaitable: Awaitable[T],
    operation: str,
    timeout: float | None = None,
) -> T:
    """
    Await storage work under a deadline.

    On expiry the inner task is cancelled, so the caller's session sees the
    exception and rolls back; the caller gets StorageTimeout.
    """
    seconds = settings.STORAGE_TIMEOUT_SECONDS if timeout is None else timeout
    try:
        return await asyncio.wait_for(awaitable, timeout=seconds)
    except asyncio.TimeoutError as e:
        logger.warning("storage_timeout", operation=operation, timeout_seconds=seconds)
        raise StorageTimeout() from e
