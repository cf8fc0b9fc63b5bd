"""
User repository for database operations.
"""

import re
from typing import Any, Optional
from uuid import uuid4

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from models.user import User

_USERNAME_STRIP = re.compile(r"[^A-Za-z0-9_]+")


def username_base(name: Optional[str], email: str) -> str:
    """Derive a valid username stem from a display name or an email local part."""
    raw = name or email.split("@", 1)[0]
    base = _USERNAME_STRIP.sub("_", raw.strip()).strip("_").lower()[:24]
    if len(base) < 3:
        base = (base + "_user")[:24]
    return base


class UserRepository:
    """Repository for user database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    def _get_rowcount(self, result: Any) -> int:
        """Safely get rowcount from result."""
        return getattr(result, "rowcount", 0) or 0

    async def get_by_id(self, user_id: str) -> Optional[User]:
        """Get a user by ID."""
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get a user by email."""
        result = await self.db.execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()

    async def get_by_username(self, username: str) -> Optional[User]:
        """Get a user by username."""
        result = await self.db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def email_exists(self, email: str) -> bool:
        """Check if email is already registered."""
        result = await self.db.execute(select(func.count(User.id)).where(User.email == email.lower()))
        count = result.scalar() or 0
        return count > 0

    async def username_exists(self, username: str) -> bool:
        """Check if username is already taken."""
        result = await self.db.execute(select(func.count(User.id)).where(User.username == username))
        count = result.scalar() or 0
        return count > 0

    async def create(
        self,
        email: str,
        username: str,
        bio: Optional[str] = None,
        avatar_url: Optional[str] = None,
    ) -> User:
        """Create a new user profile."""
        user = User(
            id=str(uuid4()),
            email=email.lower(),
            username=username,
            bio=bio,
            avatar_url=avatar_url,
        )

        self.db.add(user)
        await self.db.flush()

        return user

    async def unique_username(self, base: str, max_attempts: int = 50) -> str:
        """Return base, or base with the first free numeric suffix."""
        if not await self.username_exists(base):
            return base
        for suffix in range(1, max_attempts + 1):
            candidate = f"{base}{suffix}"
            if not await self.username_exists(candidate):
                return candidate
        return f"{base}_{uuid4().hex[:5]}"

    async def provision_oauth_user(
        self,
        email: str,
        name: Optional[str] = None,
        avatar_url: Optional[str] = None,
    ) -> User:
        """
        Resolve the user for a first OAuth login.

        Returns the existing account for the email, or creates one with a
        username derived from the provider's display name.
        """
        existing = await self.get_by_email(email)
        if existing:
            return existing

        username = await self.unique_username(username_base(name, email))
        return await self.create(email=email, username=username, avatar_url=avatar_url)

    async def update_profile(
        self,
        user_id: str,
        username: Optional[str] = None,
        avatar_url: Optional[str] = None,
        bio: Optional[str] = None,
    ) -> Optional[User]:
        """Update user profile fields."""
        updates = {}
        if username is not None:
            updates["username"] = username
        if avatar_url is not None:
            updates["avatar_url"] = avatar_url
        if bio is not None:
            updates["bio"] = bio

        if not updates:
            return await self.get_by_id(user_id)

        await self.db.execute(update(User).where(User.id == user_id).values(**updates))

        return await self.get_by_id(user_id)
