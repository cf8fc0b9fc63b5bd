"""
Pytest fixtures for Postboard backend tests.
"""

import os
from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

# Set test environment variables before importing app
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-testing")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DEBUG", "false")

from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

import models  # noqa: E402,F401
from core.context import RequestContext  # noqa: E402
from core.security import create_access_token  # noqa: E402
from db.base import Base  # noqa: E402
from db.session import get_db  # noqa: E402
from models.post import Post  # noqa: E402
from models.user import User  # noqa: E402
from repositories.post_repository import PostRepository  # noqa: E402
from repositories.user_repository import UserRepository  # noqa: E402


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Use asyncio backend for async tests."""
    return "asyncio"


@pytest.fixture
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """
    File-backed SQLite engine with the full schema.

    A file (not :memory:) lets several sessions use separate connections,
    the way concurrent requests do.
    """
    test_engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'postboard.db'}")
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """A session for arranging and asserting test data."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def app(session_factory: async_sessionmaker[AsyncSession]) -> AsyncGenerator[Any, None]:
    """FastAPI application wired to the test database."""
    from main import app as fastapi_app

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    fastapi_app.dependency_overrides[get_db] = override_get_db
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
async def client(app: Any) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def mock_db_session() -> AsyncMock:
    """Create mock database session."""
    session = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def make_user(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[..., Awaitable[User]]:
    """Factory that commits a user in its own session."""
    counter = {"n": 0}

    async def _make_user(username: str | None = None, email: str | None = None, **kwargs: Any) -> User:
        counter["n"] += 1
        username = username or f"user{counter['n']}"
        email = email or f"{username}@example.com"
        async with session_factory() as session:
            user = await UserRepository(session).create(email=email, username=username, **kwargs)
            await session.commit()
        return user

    return _make_user


@pytest.fixture
def make_post(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[..., Awaitable[Post]]:
    """Factory that commits a post in its own session."""

    async def _make_post(
        author: User,
        title: str = "A post",
        content: str = "Some **markdown**",
        tags: list[str] | None = None,
        image_urls: list[str] | None = None,
    ) -> Post:
        async with session_factory() as session:
            post = await PostRepository(session).create(
                user_id=author.id,
                title=title,
                content=content,
                tags=tags or [],
                image_urls=image_urls or [],
            )
            await session.commit()
        return post

    return _make_post


@pytest.fixture
def auth_headers_for() -> Callable[..., dict[str, str]]:
    """Bearer header for a user, as the identity provider would issue it."""

    def _headers(user: User, **claims: Any) -> dict[str, str]:
        token = create_access_token({"sub": user.id, **claims})
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def context_for() -> Callable[[User], RequestContext]:
    def _context(user: User) -> RequestContext:
        return RequestContext(user_id=user.id, username=user.username, request_id="test-request")

    return _context
