"""
Shared dependencies for API endpoints.

Includes:
- Bearer JWT authentication (tokens come from the external identity provider)
- First-login provisioning for OAuth accounts
- The explicit RequestContext handed to services
"""

from typing import Annotated, Any, Optional

import structlog
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from core.context import RequestContext
from core.exceptions import Unauthenticated
from core.security import decode_token
from db.session import get_db
from models.user import User
from repositories.user_repository import UserRepository
from schemas.converters import user_model_to_in_db
from schemas.user import UserInDB

logger = structlog.get_logger(__name__)

# Missing credentials are reported as our own Unauthenticated error
security = HTTPBearer(auto_error=False)


# =============================================================================
# Helper Functions
# =============================================================================


async def _resolve_user(payload: dict[str, Any], db: AsyncSession) -> Optional[User]:
    """
    Find the user a token belongs to.

    Tokens normally carry our user id as `sub`. On a first OAuth login the
    provider's subject is unknown to us, so the `email` claim is used to
    find or provision the account.
    """
    repo = UserRepository(db)

    user_id = payload.get("sub")
    if user_id:
        user = await repo.get_by_id(str(user_id))
        if user:
            return user

    email = payload.get("email")
    if not email:
        return None

    user = await repo.provision_oauth_user(
        email=email,
        name=payload.get("name"),
        avatar_url=payload.get("picture"),
    )
    logger.info("oauth_user_resolved", user_id=user.id, provider_sub=user_id)
    return user


# =============================================================================
# User Authentication (JWT-based)
# =============================================================================


async def get_current_user(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    db: AsyncSession = Depends(get_db),
) -> UserInDB:
    """
    Extract and validate the current user from the bearer token.

    Raises:
        Unauthenticated: no token, invalid or expired token, or no user.
    """
    if credentials is None:
        raise Unauthenticated("Not authenticated")

    payload = decode_token(credentials.credentials)
    if payload is None:
        raise Unauthenticated("Invalid or expired token")

    user = await _resolve_user(payload, db)
    if user is None:
        logger.warning("token_user_not_found", sub=payload.get("sub"))
        raise Unauthenticated("User not found")

    return user_model_to_in_db(user)


async def get_current_user_optional(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    db: AsyncSession = Depends(get_db),
) -> UserInDB | None:
    """
    Optionally extract the current user from the bearer token.

    Returns None if no token is provided or the token is invalid.
    """
    if credentials is None:
        return None

    payload = decode_token(credentials.credentials)
    if payload is None:
        return None

    user = await _resolve_user(payload, db)
    return user_model_to_in_db(user) if user else None


async def get_request_context(
    request: Request,
    current_user: Annotated[UserInDB, Depends(get_current_user)],
) -> RequestContext:
    """Identity of the caller plus the request id, passed explicitly to services."""
    return RequestContext(
        user_id=current_user.id,
        username=current_user.username,
        request_id=getattr(request.state, "request_id", None),
    )


CurrentUser = Annotated[UserInDB, Depends(get_current_user)]
Context = Annotated[RequestContext, Depends(get_request_context)]
