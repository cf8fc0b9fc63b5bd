"""
Vote-related Pydantic schemas.
"""

from typing import Optional

from pydantic import BaseModel, Field, StrictInt


class VoteCreate(BaseModel):
    """Schema for casting a vote. Presence and range are checked by the ledger."""

    post_id: Optional[str] = None
    value: Optional[StrictInt] = Field(None, description="1 for an upvote, -1 for a downvote")


class VoteResponse(BaseModel):
    """Response after a vote is cast, flipped or retracted."""

    post_id: str
    upvotes: int
    user_vote: int = Field(description="Caller's vote after the operation; 0 when retracted")
    message: str = "Vote recorded successfully"


class VoteStatus(BaseModel):
    """The caller's current vote on a post."""

    post_id: str
    value: int = 0
