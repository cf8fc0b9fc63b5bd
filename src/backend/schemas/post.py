"""
Post-related Pydantic schemas.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from schemas.common import Page
from schemas.user import AuthorSummary


class PostCreate(BaseModel):
    """Schema for creating a post."""

    title: Optional[str] = None
    content: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    image_urls: list[str] = Field(
        default_factory=list,
        description="http(s) URLs or data:image/...;base64 URIs",
    )


class PostUpdate(BaseModel):
    """Only the provided fields are changed."""

    title: Optional[str] = None
    content: Optional[str] = None
    tags: Optional[list[str]] = None


class PostResponse(BaseModel):
    """Post as returned to clients."""

    id: str
    title: str
    content: str
    image_urls: list[str] = []
    tags: list[str] = []
    upvotes: int = 0
    user_vote: Optional[int] = Field(None, description="Caller's vote when authenticated")
    author: Optional[AuthorSummary] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


PostListResponse = Page[PostResponse]


class PostViewsResponse(BaseModel):
    """View count for a post; is_new_view is set when a view was recorded."""

    post_id: str
    views: int
    is_new_view: Optional[bool] = None
