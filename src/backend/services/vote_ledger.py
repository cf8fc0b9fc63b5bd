"""
Vote Ledger

Keeps one signed vote per (user, post) and the post's denormalized tally.

Casting a vote is a toggle:
- no prior vote: insert it, tally += value
- same value again: retraction, delete it, tally -= value
- opposite value: flip in place, tally += 2 * value

All mutations for one post are serialized (keyed asyncio lock in-process,
advisory lock on PostgreSQL) and the vote row plus the tally commit in the
same transaction.
"""

from dataclasses import dataclass

import structlog
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.context import RequestContext
from core.exceptions import Conflict, InvalidArgument, NotFound, StorageFailure
from core.timeouts import run_with_timeout
from models.vote import VOTE_VALUES
from repositories.post_repository import PostRepository
from repositories.vote_repository import VoteRepository
from services.lock_service import acquire_advisory_lock, post_vote_lock_key, vote_locks

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class VoteResult:
    """Outcome of a cast: the new tally and the caller's vote (0 if retracted)."""

    post_id: str
    upvotes: int
    user_vote: int


def validate_vote_value(value: object) -> int:
    """Only +1 and -1 are accepted; bools are rejected even though True == 1."""
    if isinstance(value, bool) or not isinstance(value, int) or value not in VOTE_VALUES:
        raise InvalidArgument("Vote value must be 1 or -1")
    return value


class VoteLedger:
    """Casts and reads votes within one request's session."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.posts = PostRepository(db)
        self.votes = VoteRepository(db)

    async def cast_vote(self, ctx: RequestContext, post_id: str | None, value: object) -> VoteResult:
        """
        Apply the caller's vote on a post and return the new tally.

        Raises:
            InvalidArgument: value is not +1/-1 or post_id is missing
            NotFound: the post does not exist
            Conflict: a duplicate (user, post) row slipped past serialization
            StorageFailure / StorageTimeout: the database failed or was too slow
        """
        vote_value = validate_vote_value(value)
        if not post_id:
            raise InvalidArgument("post_id is required")

        return await run_with_timeout(
            self._cast_serialized(ctx, post_id, vote_value),
            operation="cast_vote",
        )

    async def _cast_serialized(self, ctx: RequestContext, post_id: str, value: int) -> VoteResult:
        key = post_vote_lock_key(post_id)
        async with vote_locks.hold(key):
            try:
                result = await self._apply(ctx, post_id, value, key)
                await self.db.commit()
            except IntegrityError as e:
                await self.db.rollback()
                logger.warning(
                    "vote_conflict",
                    post_id=post_id,
                    user_id=ctx.user_id,
                    request_id=ctx.request_id,
                    error=str(e.orig),
                )
                raise Conflict("A vote for this post was recorded concurrently") from e
            except SQLAlchemyError as e:
                await self.db.rollback()
                logger.error(
                    "vote_storage_failure",
                    post_id=post_id,
                    user_id=ctx.user_id,
                    request_id=ctx.request_id,
                    error=str(e),
                )
                raise StorageFailure() from e
            except NotFound:
                await self.db.rollback()
                raise

        logger.info(
            "vote_cast",
            post_id=post_id,
            user_id=ctx.user_id,
            request_id=ctx.request_id,
            user_vote=result.user_vote,
            upvotes=result.upvotes,
        )
        return result

    async def _apply(self, ctx: RequestContext, post_id: str, value: int, key: str) -> VoteResult:
        await acquire_advisory_lock(self.db, key)

        if not await self.posts.exists(post_id):
            raise NotFound("Post not found")

        existing = await self.votes.get(ctx.user_id, post_id)

        if existing is None:
            await self.votes.create(ctx.user_id, post_id, value)
            delta, user_vote = value, value
        elif existing.value == value:
            await self.votes.delete(existing.id)
            delta, user_vote = -value, 0
        else:
            await self.votes.set_value(existing.id, value)
            delta, user_vote = 2 * value, value

        upvotes = await self.posts.apply_vote_delta(post_id, delta)
        return VoteResult(post_id=post_id, upvotes=upvotes, user_vote=user_vote)

    async def get_user_vote(self, user_id: str, post_id: str) -> int:
        """Current vote of a user on a post, or 0 if none."""
        try:
            vote = await self.votes.get(user_id, post_id)
        except SQLAlchemyError as e:
            logger.error("vote_lookup_failed", post_id=post_id, user_id=user_id, error=str(e))
            raise StorageFailure() from e
        return vote.value if vote else 0
