"""
Comment repository for database operations.
"""

from typing import Any, Optional
from uuid import uuid4

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from models.comment import Comment


class CommentRepository:
    """Repository for comment database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    def _get_rowcount(self, result: Any) -> int:
        """Safely get rowcount from result."""
        return getattr(result, "rowcount", 0) or 0

    async def get_by_id(self, comment_id: str) -> Optional[Comment]:
        result = await self.db.execute(
            select(Comment).where(Comment.id == comment_id).execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_for_post(self, post_id: str) -> list[Comment]:
        """All comments of a post, newest first (the order the tree keeps)."""
        result = await self.db.execute(
            select(Comment)
            .where(Comment.post_id == post_id)
            .order_by(Comment.created_at.desc(), Comment.id.desc())
        )
        return list(result.scalars().all())

    async def create(
        self,
        post_id: str,
        user_id: str,
        content: str,
        parent_id: Optional[str] = None,
    ) -> Comment:
        """Create a comment; parent_id must already be validated."""
        comment = Comment(
            id=str(uuid4()),
            post_id=post_id,
            user_id=user_id,
            content=content,
            parent_id=parent_id,
        )

        self.db.add(comment)
        await self.db.flush()

        return await self.get_by_id(comment.id)  # type: ignore[return-value]

    async def delete(self, comment_id: str) -> bool:
        """Delete one comment. Its replies stay and surface as roots."""
        result = await self.db.execute(delete(Comment).where(Comment.id == comment_id))
        return self._get_rowcount(result) > 0
