"""
Comment Service

Creates, lists and deletes comments. Listing returns the reply forest
built by the comment tree assembler.
"""

from typing import Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.context import RequestContext
from core.exceptions import InvalidArgument, NotFound, PermissionDenied
from core.timeouts import run_with_timeout
from models.comment import Comment
from repositories.comment_repository import CommentRepository
from repositories.post_repository import PostRepository
from services.comment_tree import CommentNode, build_comment_tree

logger = structlog.get_logger(__name__)


def validate_comment_content(content: Optional[str]) -> str:
    if content is None or not content.strip():
        raise InvalidArgument("content is required")
    if len(content) > settings.MAX_COMMENT_LENGTH:
        raise InvalidArgument(f"Comments must be at most {settings.MAX_COMMENT_LENGTH} characters")
    return content


class CommentService:
    """Comment operations on one request's session."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.comments = CommentRepository(db)
        self.posts = PostRepository(db)

    async def list_tree(self, post_id: Optional[str]) -> list[CommentNode[Comment]]:
        """Comment forest of a post, newest first at every level."""
        if not post_id:
            raise InvalidArgument("post_id is required")

        comments = await run_with_timeout(self.comments.list_for_post(post_id), operation="list_comments")
        return build_comment_tree(comments)

    async def create_comment(
        self,
        ctx: RequestContext,
        post_id: Optional[str],
        content: Optional[str],
        parent_id: Optional[str] = None,
    ) -> Comment:
        """
        Add a comment or a reply.

        Raises:
            InvalidArgument: missing fields, content too long, or a parent
                that does not exist on the same post
            NotFound: the post does not exist
        """
        if not post_id:
            raise InvalidArgument("post_id is required")
        body = validate_comment_content(content)

        return await run_with_timeout(
            self._create(ctx, post_id, body, parent_id or None),
            operation="create_comment",
        )

    async def _create(
        self,
        ctx: RequestContext,
        post_id: str,
        content: str,
        parent_id: Optional[str],
    ) -> Comment:
        if not await self.posts.exists(post_id):
            raise NotFound("Post not found")

        if parent_id is not None:
            parent = await self.comments.get_by_id(parent_id)
            if parent is None or parent.post_id != post_id:
                raise InvalidArgument("Parent comment must belong to the same post")

        comment = await self.comments.create(
            post_id=post_id,
            user_id=ctx.user_id,
            content=content,
            parent_id=parent_id,
        )
        logger.info(
            "comment_created",
            comment_id=comment.id,
            post_id=post_id,
            parent_id=parent_id,
            user_id=ctx.user_id,
            request_id=ctx.request_id,
        )
        return comment

    async def delete_comment(self, ctx: RequestContext, comment_id: str) -> None:
        comment = await self.comments.get_by_id(comment_id)
        if comment is None:
            raise NotFound("Comment not found")
        if comment.user_id != ctx.user_id:
            raise PermissionDenied("Only the author can delete this comment")

        await self.comments.delete(comment_id)
        logger.info("comment_deleted", comment_id=comment_id, user_id=ctx.user_id, request_id=ctx.request_id)
