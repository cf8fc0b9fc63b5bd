"""
Shared response schemas.
"""

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

ItemType = TypeVar("ItemType")


class ErrorResponse(BaseModel):
    """Body of every error response."""

    detail: str
    code: str


class MessageResponse(BaseModel):
    message: str


class Page(BaseModel, Generic[ItemType]):
    """One page of an offset-paginated listing."""

    items: list[ItemType]
    page: int
    page_size: int
    total_pages: int
    total: int = Field(description="Number of matching items across all pages")
    has_next: bool
    has_prev: bool
