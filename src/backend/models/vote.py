"""
Vote model.

One signed vote per (user, post). The row is the source of truth; the
post's upvotes column is a cache maintained by the vote ledger.
"""

from sqlalchemy import CheckConstraint, ForeignKey, SmallInteger, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin, id_column

UPVOTE = 1
DOWNVOTE = -1
VOTE_VALUES = (UPVOTE, DOWNVOTE)


class Vote(TimestampMixin, Base):
    """A user's +1/-1 vote on a post."""

    __tablename__ = "votes"

    __table_args__ = (
        UniqueConstraint("user_id", "post_id", name="uq_votes_user_post"),
        CheckConstraint("value IN (-1, 1)", name="value_sign"),
    )

    id: Mapped[str] = id_column()

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
    )
    post_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("posts.id", ondelete="CASCADE"),
        index=True,
    )

    value: Mapped[int] = mapped_column(SmallInteger)

    def __repr__(self) -> str:
        return f"<Vote(user_id={self.user_id}, post_id={self.post_id}, value={self.value})>"
