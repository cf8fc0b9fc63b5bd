"""Schemas module initialization."""

from schemas.comment import CommentCreate, CommentResponse, CommentThread
from schemas.common import ErrorResponse, MessageResponse, Page
from schemas.post import PostCreate, PostListResponse, PostResponse, PostUpdate, PostViewsResponse
from schemas.user import (
    AuthorSummary,
    PublicProfile,
    UserCreate,
    UserInDB,
    UserProfileUpdate,
    UserResponse,
)
from schemas.vote import VoteCreate, VoteResponse, VoteStatus

__all__ = [
    "AuthorSummary",
    "PublicProfile",
    "UserCreate",
    "UserResponse",
    "UserInDB",
    "UserProfileUpdate",
    "PostCreate",
    "PostUpdate",
    "PostResponse",
    "PostListResponse",
    "PostViewsResponse",
    "CommentCreate",
    "CommentResponse",
    "CommentThread",
    "VoteCreate",
    "VoteResponse",
    "VoteStatus",
    "ErrorResponse",
    "MessageResponse",
    "Page",
]
