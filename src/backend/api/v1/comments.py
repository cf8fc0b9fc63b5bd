"""
Comment endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import Context
from db.session import get_db
from schemas.comment import CommentCreate, CommentResponse, CommentThread
from schemas.common import MessageResponse
from schemas.converters import comment_forest_to_json, comment_model_to_schema
from services.comment_service import CommentService

router = APIRouter()


@router.get("", response_model=list[CommentThread])
async def list_comments(
    post_id: Optional[str] = Query(None, description="Post whose comments to return"),
    db: AsyncSession = Depends(get_db),
) -> Response:
    """
    Get the comment forest of a post.

    Roots and replies are newest first. A reply whose parent no longer
    exists is listed as a root.
    """
    service = CommentService(db)
    roots = await service.list_tree(post_id)
    return Response(content=comment_forest_to_json(roots), media_type="application/json")


@router.post("", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def create_comment(
    comment_data: CommentCreate,
    ctx: Context,
    db: AsyncSession = Depends(get_db),
) -> CommentResponse:
    """Comment on a post, or reply to a comment of the same post."""
    service = CommentService(db)
    comment = await service.create_comment(
        ctx,
        post_id=comment_data.post_id,
        content=comment_data.content,
        parent_id=comment_data.parent_id,
    )
    return comment_model_to_schema(comment)


@router.delete("/{comment_id}", response_model=MessageResponse)
async def delete_comment(
    comment_id: str,
    ctx: Context,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    """Delete one of your own comments. Replies to it are kept."""
    service = CommentService(db)
    await service.delete_comment(ctx, comment_id)
    return MessageResponse(message="Comment deleted successfully")
