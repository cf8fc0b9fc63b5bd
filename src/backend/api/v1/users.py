"""
User signup and profile endpoints.
"""

import structlog
from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import CurrentUser
from core.exceptions import Conflict, NotFound
from db.session import get_db
from repositories.user_repository import UserRepository
from schemas.converters import user_model_to_public, user_model_to_response
from schemas.user import PublicProfile, UserCreate, UserProfileUpdate, UserResponse

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    user_data: UserCreate,
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    """
    Register a profile.

    Credentials stay with the identity provider; tokens it issues carry
    the new user's id as subject.
    """
    user_repo = UserRepository(db)

    if await user_repo.email_exists(user_data.email):
        raise Conflict("Email already registered")
    if await user_repo.username_exists(user_data.username):
        raise Conflict("Username already taken")

    try:
        user = await user_repo.create(
            email=user_data.email,
            username=user_data.username,
            bio=user_data.bio,
            avatar_url=user_data.avatar_url,
        )
    except IntegrityError as e:
        await db.rollback()
        raise Conflict("Email or username already registered") from e

    logger.info("user_signed_up", user_id=user.id, username=user.username)
    return user_model_to_response(user)


@router.get("/me", response_model=UserResponse)
async def get_my_profile(
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    """Get the current user's profile."""
    user = await UserRepository(db).get_by_id(current_user.id)
    if not user:
        raise NotFound("User not found")
    return user_model_to_response(user)


@router.put("/me", response_model=UserResponse)
async def update_my_profile(
    profile_update: UserProfileUpdate,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    """Update the current user's username, bio or avatar."""
    user_repo = UserRepository(db)

    if (
        profile_update.username
        and profile_update.username != current_user.username
        and await user_repo.username_exists(profile_update.username)
    ):
        raise Conflict("Username already taken")

    user = await user_repo.update_profile(
        user_id=current_user.id,
        username=profile_update.username,
        avatar_url=profile_update.avatar_url,
        bio=profile_update.bio,
    )
    if not user:
        raise NotFound("User not found")
    return user_model_to_response(user)


@router.get("/{username}", response_model=PublicProfile)
async def get_public_profile(
    username: str,
    db: AsyncSession = Depends(get_db),
) -> PublicProfile:
    """Get anyone's public profile by username."""
    user = await UserRepository(db).get_by_username(username)
    if not user:
        raise NotFound("User not found")
    return user_model_to_public(user)
