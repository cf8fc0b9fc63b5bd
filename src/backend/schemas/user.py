"""
User-related Pydantic schemas.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

USERNAME_PATTERN = r"^[A-Za-z0-9_]{3,30}$"


class UserCreate(BaseModel):
    """Schema for signup.

    Passwords and OAuth credentials are handled by the identity provider;
    only the profile is stored here.
    """

    email: EmailStr
    username: str = Field(..., pattern=USERNAME_PATTERN)
    bio: Optional[str] = Field(None, max_length=500)
    avatar_url: Optional[str] = Field(None, max_length=500)


class UserProfileUpdate(BaseModel):
    """Schema for updating the caller's own profile."""

    username: Optional[str] = Field(None, pattern=USERNAME_PATTERN)
    bio: Optional[str] = Field(None, max_length=500)
    avatar_url: Optional[str] = Field(None, max_length=500)


class AuthorSummary(BaseModel):
    """Author block embedded in posts and comments."""

    id: str
    username: str
    avatar_url: Optional[str] = None

    model_config = {"from_attributes": True}


class PublicProfile(AuthorSummary):
    """Profile visible to anyone."""

    bio: Optional[str] = None
    created_at: Optional[datetime] = None


class UserResponse(PublicProfile):
    """The caller's own profile, including private fields."""

    email: EmailStr


class UserInDB(BaseModel):
    """Authenticated user as seen by request handlers (internal use)."""

    id: str
    email: str
    username: str
    avatar_url: Optional[str] = None
    bio: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
