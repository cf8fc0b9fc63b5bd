"""
Tests for user repository.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from repositories.user_repository import UserRepository


@pytest.mark.unit
class TestUserRepository:
    """Test UserRepository operations."""

    def test_repository_instantiation(self, mock_db_session) -> None:
        repo = UserRepository(mock_db_session)
        assert repo.db == mock_db_session

    async def test_get_by_id_returns_user(self, mock_db_session) -> None:
        mock_user = MagicMock()
        mock_user.id = "user-1"

        mock_result = MagicMock()
        mock_result.scalar_one_or_none = MagicMock(return_value=mock_user)
        mock_db_session.execute = AsyncMock(return_value=mock_result)

        result = await UserRepository(mock_db_session).get_by_id("user-1")

        assert result == mock_user
        mock_db_session.execute.assert_called_once()

    async def test_email_lookup_is_case_insensitive(self, db_session, make_user) -> None:
        user = await make_user("casey", email="Casey@Example.com")
        repo = UserRepository(db_session)

        assert (await repo.get_by_email("CASEY@example.COM")).id == user.id
        assert await repo.email_exists("casey@example.com") is True

    async def test_username_exists(self, db_session, make_user) -> None:
        await make_user("present")
        repo = UserRepository(db_session)

        assert await repo.username_exists("present") is True
        assert await repo.username_exists("absent") is False

    async def test_update_profile_only_changes_given_fields(self, db_session, make_user) -> None:
        user = await make_user("editor", bio="old")
        repo = UserRepository(db_session)

        updated = await repo.update_profile(user.id, avatar_url="https://example.com/a.png")

        assert updated.bio == "old"
        assert updated.avatar_url == "https://example.com/a.png"

    async def test_provision_creates_once(self, db_session) -> None:
        repo = UserRepository(db_session)

        first = await repo.provision_oauth_user("oauth@example.com", name="OAuth Person")
        second = await repo.provision_oauth_user("OAUTH@example.com", name="Someone Else")

        assert first.id == second.id
        assert first.username == "oauth_person"
