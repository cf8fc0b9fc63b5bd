"""
Post view repository.
"""

from uuid import uuid4

from sqlalchemy import and_, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from models.post_view import PostView


class PostViewRepository:
    """Repository for per-user post views."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def has_viewed(self, post_id: str, user_id: str) -> bool:
        result = await self.db.execute(
            select(func.count(PostView.id)).where(
                and_(PostView.post_id == post_id, PostView.user_id == user_id)
            )
        )
        return (result.scalar() or 0) > 0

    async def record(self, post_id: str, user_id: str) -> bool:
        """
        Record a view once per user.

        Returns True when a new view row was written.
        """
        if await self.has_viewed(post_id, user_id):
            return False

        try:
            async with self.db.begin_nested():
                self.db.add(PostView(id=str(uuid4()), post_id=post_id, user_id=user_id))
                await self.db.flush()
        except IntegrityError:
            # A concurrent request recorded the same view first; only the
            # savepoint is rolled back, earlier writes of this request stay
            return False
        return True

    async def count_by_post(self, post_id: str) -> int:
        result = await self.db.execute(select(func.count(PostView.id)).where(PostView.post_id == post_id))
        return result.scalar() or 0
