"""
User model.

Credentials live with the external identity provider; this table only
holds the public profile.
"""

from typing import Optional

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin, id_column


class User(TimestampMixin, Base):
    """User profile, created at signup or on first OAuth login."""

    __tablename__ = "users"

    id: Mapped[str] = id_column()

    username: Mapped[str] = mapped_column(String(30), unique=True, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)

    # Profile
    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    avatar_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username})>"
