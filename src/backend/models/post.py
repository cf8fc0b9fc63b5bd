"""
Post model and its ordered tag links.
"""

from typing import TYPE_CHECKING

from sqlalchemy import JSON, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base, TimestampMixin, id_column

if TYPE_CHECKING:
    from models.user import User


class Post(TimestampMixin, Base):
    """
    A post authored by one user.

    upvotes is a denormalized tally: it must always equal the sum of the
    post's Vote values and is only changed by the vote ledger.
    """

    __tablename__ = "posts"

    __table_args__ = (
        Index("ix_posts_user_created", "user_id", "created_at"),
        Index("ix_posts_upvotes", "upvotes"),
    )

    id: Mapped[str] = id_column()

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
    )

    title: Mapped[str] = mapped_column(String(300))
    content: Mapped[str] = mapped_column(Text)

    # References into the blob store (URLs or inline data URIs), in display order
    image_urls: Mapped[list[str]] = mapped_column(JSON, default=list)

    upvotes: Mapped[int] = mapped_column(Integer, default=0)

    author: Mapped["User"] = relationship(lazy="selectin")
    tag_links: Mapped[list["PostTag"]] = relationship(
        back_populates="post",
        cascade="all, delete-orphan",
        order_by="PostTag.position",
        lazy="selectin",
    )

    @property
    def tags(self) -> list[str]:
        return [link.tag for link in self.tag_links]

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, title={self.title[:30]!r}, upvotes={self.upvotes})>"


class PostTag(Base):
    """Lower-cased tag attached to a post; position keeps display order."""

    __tablename__ = "post_tags"

    post_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("posts.id", ondelete="CASCADE"),
        primary_key=True,
    )
    tag: Mapped[str] = mapped_column(String(50), primary_key=True, index=True)
    position: Mapped[int] = mapped_column(Integer, default=0)

    post: Mapped["Post"] = relationship(back_populates="tag_links")
