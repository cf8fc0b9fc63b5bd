"""
Vote repository for database operations.

Rows are keyed by (user_id, post_id); the tally on the post is handled by
the vote ledger, not here.
"""

from typing import Optional
from uuid import uuid4

from sqlalchemy import and_, delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from models.vote import Vote


class VoteRepository:
    """Repository for vote database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, user_id: str, post_id: str) -> Optional[Vote]:
        """Get the vote a user cast on a post, if any."""
        result = await self.db.execute(
            select(Vote)
            .where(and_(Vote.user_id == user_id, Vote.post_id == post_id))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def create(self, user_id: str, post_id: str, value: int) -> Vote:
        """Insert a vote. Raises IntegrityError if the pair already voted."""
        vote = Vote(
            id=str(uuid4()),
            user_id=user_id,
            post_id=post_id,
            value=value,
        )

        self.db.add(vote)
        await self.db.flush()

        return vote

    async def set_value(self, vote_id: str, value: int) -> None:
        """Flip a vote in place."""
        await self.db.execute(update(Vote).where(Vote.id == vote_id).values(value=value))

    async def delete(self, vote_id: str) -> None:
        """Remove a vote (retraction)."""
        await self.db.execute(delete(Vote).where(Vote.id == vote_id))

    async def count_by_post(self, post_id: str) -> int:
        """Number of vote rows on a post."""
        result = await self.db.execute(select(func.count(Vote.id)).where(Vote.post_id == post_id))
        return result.scalar() or 0

    async def sum_by_post(self, post_id: str) -> int:
        """Sum of vote values on a post; equals the post's tally when consistent."""
        result = await self.db.execute(
            select(func.coalesce(func.sum(Vote.value), 0)).where(Vote.post_id == post_id)
        )
        return int(result.scalar() or 0)
