"""
Comment-related Pydantic schemas.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from schemas.user import AuthorSummary


class CommentCreate(BaseModel):
    """Schema for creating a comment or a reply."""

    post_id: Optional[str] = None
    content: Optional[str] = None
    parent_id: Optional[str] = None


class CommentResponse(BaseModel):
    id: str
    post_id: str
    parent_id: Optional[str] = None
    content: str
    author: Optional[AuthorSummary] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class CommentThread(CommentResponse):
    """A comment with its nested replies, newest first."""

    replies: list["CommentThread"] = Field(default_factory=list)


CommentThread.model_rebuild()
