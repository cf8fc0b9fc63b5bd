"""
Tests for the keyed lock registry and advisory lock helper.
"""

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from services.lock_service import KeyedLockRegistry, acquire_advisory_lock, post_vote_lock_key


@pytest.mark.unit
class TestKeyedLockRegistry:
    async def test_same_key_is_serialized(self) -> None:
        registry = KeyedLockRegistry()
        events: list[str] = []

        async def worker(name: str) -> None:
            async with registry.hold("k"):
                events.append(f"{name}-in")
                await asyncio.sleep(0.01)
                events.append(f"{name}-out")

        await asyncio.gather(worker("a"), worker("b"))

        assert events in (["a-in", "a-out", "b-in", "b-out"], ["b-in", "b-out", "a-in", "a-out"])

    async def test_different_keys_do_not_block(self) -> None:
        registry = KeyedLockRegistry()

        async with registry.hold("one"):
            async with registry.hold("two"):
                assert registry.is_locked("one")
                assert registry.is_locked("two")

    async def test_idle_locks_are_dropped(self) -> None:
        registry = KeyedLockRegistry()

        async with registry.hold("k"):
            assert len(registry) == 1
        assert len(registry) == 0
        assert registry.is_locked("k") is False

    async def test_lock_released_on_error(self) -> None:
        registry = KeyedLockRegistry()

        with pytest.raises(RuntimeError):
            async with registry.hold("k"):
                raise RuntimeError("boom")

        assert len(registry) == 0


@pytest.mark.unit
class TestAdvisoryLock:
    async def test_skipped_outside_postgres(self) -> None:
        db = SimpleNamespace(bind=SimpleNamespace(dialect=SimpleNamespace(name="sqlite")), execute=AsyncMock())

        assert await acquire_advisory_lock(db, "post-votes:1") is False
        db.execute.assert_not_awaited()

    async def test_taken_on_postgres(self) -> None:
        db = SimpleNamespace(bind=SimpleNamespace(dialect=SimpleNamespace(name="postgresql")), execute=AsyncMock())

        assert await acquire_advisory_lock(db, "post-votes:1") is True
        statement, params = db.execute.await_args.args
        assert "pg_advisory_xact_lock" in str(statement)
        assert params == {"key": "post-votes:1"}

    def test_vote_lock_key(self) -> None:
        assert post_vote_lock_key("abc") == "post-votes:abc"
