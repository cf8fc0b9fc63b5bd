"""
Comment model.

parent_id links a reply to another comment of the same post. The column
is not a foreign key: a deleted parent leaves its replies in place and the
tree assembler shows them as root comments.
"""

from typing import TYPE_CHECKING, Optional

from sqlalchemy import ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base, TimestampMixin, id_column

if TYPE_CHECKING:
    from models.user import User


class Comment(TimestampMixin, Base):
    """A comment on a post, optionally replying to another comment."""

    __tablename__ = "comments"

    __table_args__ = (Index("ix_comments_post_created", "post_id", "created_at"),)

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
    parent_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, index=True)

    content: Mapped[str] = mapped_column(Text)

    author: Mapped["User"] = relationship(lazy="selectin")

    def __repr__(self) -> str:
        return f"<Comment(id={self.id}, post_id={self.post_id}, parent_id={self.parent_id})>"
