"""
Post endpoints: feed, CRUD and view counting.
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import Context, get_current_user_optional
from core.config import settings
from db.session import get_db
from schemas.common import MessageResponse
from schemas.converters import post_model_to_schema
from schemas.post import (
    PostCreate,
    PostListResponse,
    PostResponse,
    PostUpdate,
    PostViewsResponse,
)
from schemas.user import UserInDB
from services.post_service import PostService
from services.vote_ledger import VoteLedger

router = APIRouter()


@router.get("", response_model=PostListResponse)
async def list_posts(
    tag: Optional[str] = Query(None, description="Only posts carrying this tag"),
    author: Optional[str] = Query(None, description="Only posts by this username"),
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: AsyncSession = Depends(get_db),
) -> PostListResponse:
    """
    List posts newest first.

    Offset pagination: a post created while paging can shift items
    between pages.
    """
    service = PostService(db)
    return await service.list_posts(tag=tag, author=author, page=page, page_size=page_size)


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    post_data: PostCreate,
    ctx: Context,
    db: AsyncSession = Depends(get_db),
) -> PostResponse:
    """Create a post."""
    service = PostService(db)
    post = await service.create_post(
        ctx,
        title=post_data.title,
        content=post_data.content,
        tags=post_data.tags,
        image_urls=post_data.image_urls,
    )
    return post_model_to_schema(post)


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(
    post_id: str,
    current_user: Annotated[UserInDB | None, Depends(get_current_user_optional)],
    db: AsyncSession = Depends(get_db),
) -> PostResponse:
    """Get one post; signed-in callers also get their own vote."""
    service = PostService(db)
    response = post_model_to_schema(await service.get_post(post_id))
    if current_user:
        response.user_vote = await VoteLedger(db).get_user_vote(current_user.id, post_id)
    return response


@router.put("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: str,
    post_data: PostUpdate,
    ctx: Context,
    db: AsyncSession = Depends(get_db),
) -> PostResponse:
    """Update title, content or tags of your own post."""
    service = PostService(db)
    post = await service.update_post(
        ctx,
        post_id,
        title=post_data.title,
        content=post_data.content,
        tags=post_data.tags,
    )
    return post_model_to_schema(post)


@router.delete("/{post_id}", response_model=MessageResponse)
async def delete_post(
    post_id: str,
    ctx: Context,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    """Delete your own post with its comments and votes."""
    service = PostService(db)
    await service.delete_post(ctx, post_id)
    return MessageResponse(message="Post deleted successfully")


@router.post("/{post_id}/views", response_model=PostViewsResponse)
async def record_view(
    post_id: str,
    ctx: Context,
    db: AsyncSession = Depends(get_db),
) -> PostViewsResponse:
    """Count the caller as a viewer of the post (once per user)."""
    service = PostService(db)
    views, is_new = await service.record_view(ctx, post_id)
    return PostViewsResponse(post_id=post_id, views=views, is_new_view=is_new)


@router.get("/{post_id}/views", response_model=PostViewsResponse)
async def get_views(
    post_id: str,
    db: AsyncSession = Depends(get_db),
) -> PostViewsResponse:
    service = PostService(db)
    return PostViewsResponse(post_id=post_id, views=await service.view_count(post_id))
