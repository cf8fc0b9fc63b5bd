"""
Post view model: one row per (post, viewer).
"""

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin, id_column


class PostView(TimestampMixin, Base):
    """Records that an authenticated user opened a post."""

    __tablename__ = "post_views"

    __table_args__ = (UniqueConstraint("post_id", "user_id", name="uq_post_views_post_user"),)

    id: Mapped[str] = id_column()

    post_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("posts.id", ondelete="CASCADE"),
        index=True,
    )
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
    )
