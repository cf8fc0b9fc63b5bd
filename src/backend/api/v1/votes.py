"""
Vote endpoints.

One signed vote per user and post. Voting the same direction twice
retracts the vote; voting the other direction flips it.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import Context, CurrentUser
from db.session import get_db
from schemas.vote import VoteCreate, VoteResponse, VoteStatus
from services.vote_ledger import VoteLedger

router = APIRouter()

_MESSAGES = {
    1: "Upvote recorded",
    -1: "Downvote recorded",
    0: "Vote removed",
}


@router.post("", response_model=VoteResponse, status_code=status.HTTP_200_OK)
async def cast_vote(
    vote_data: VoteCreate,
    ctx: Context,
    db: AsyncSession = Depends(get_db),
) -> VoteResponse:
    """
    Cast, flip or retract a vote on a post.

    Returns the post's new tally and the caller's resulting vote.
    """
    ledger = VoteLedger(db)
    result = await ledger.cast_vote(ctx, vote_data.post_id, vote_data.value)

    return VoteResponse(
        post_id=result.post_id,
        upvotes=result.upvotes,
        user_vote=result.user_vote,
        message=_MESSAGES[result.user_vote],
    )


@router.get("/status/{post_id}", response_model=VoteStatus)
async def get_vote_status(
    post_id: str,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> VoteStatus:
    """The caller's current vote on a post (0 when none)."""
    ledger = VoteLedger(db)
    value = await ledger.get_user_vote(current_user.id, post_id)
    return VoteStatus(post_id=post_id, value=value)
