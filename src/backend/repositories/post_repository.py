"""
Post repository for database operations.
"""

from typing import Any, Optional
from uuid import uuid4

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from models.comment import Comment
from models.post import Post, PostTag
from models.post_view import PostView
from models.vote import Vote


class PostRepository:
    """Repository for post database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    def _get_rowcount(self, result: Any) -> int:
        """Safely get rowcount from result."""
        return getattr(result, "rowcount", 0) or 0

    async def get_by_id(self, post_id: str) -> Optional[Post]:
        """Get a post by ID with its author and tags."""
        result = await self.db.execute(
            select(Post).where(Post.id == post_id).execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def exists(self, post_id: str) -> bool:
        result = await self.db.execute(select(func.count(Post.id)).where(Post.id == post_id))
        return (result.scalar() or 0) > 0

    async def list_posts(
        self,
        page: int = 1,
        per_page: int = 8,
        tag: Optional[str] = None,
        author_id: Optional[str] = None,
    ) -> tuple[list[Post], int]:
        """
        List posts newest first with offset pagination.

        Rows inserted between two page fetches can shift items across pages;
        there is no cursor.
        """
        query = select(Post)
        count_query = select(func.count(Post.id))

        if tag:
            has_tag = Post.tag_links.any(PostTag.tag == tag.strip().lower())
            query = query.where(has_tag)
            count_query = count_query.where(has_tag)

        if author_id:
            query = query.where(Post.user_id == author_id)
            count_query = count_query.where(Post.user_id == author_id)

        # Get total count
        total_result = await self.db.execute(count_query)
        total = total_result.scalar() or 0

        # Get paginated results
        query = query.order_by(Post.created_at.desc(), Post.id.desc())
        query = query.offset((page - 1) * per_page).limit(per_page)

        result = await self.db.execute(query)
        posts = list(result.scalars().all())

        return posts, total

    async def create(
        self,
        user_id: str,
        title: str,
        content: str,
        tags: list[str],
        image_urls: list[str],
    ) -> Post:
        """Create a post; tags must already be normalized."""
        post = Post(
            id=str(uuid4()),
            user_id=user_id,
            title=title,
            content=content,
            image_urls=list(image_urls),
            upvotes=0,
            tag_links=[PostTag(tag=tag, position=idx) for idx, tag in enumerate(tags)],
        )

        self.db.add(post)
        await self.db.flush()

        return await self.get_by_id(post.id)  # type: ignore[return-value]

    async def update(
        self,
        post: Post,
        title: Optional[str] = None,
        content: Optional[str] = None,
        tags: Optional[list[str]] = None,
    ) -> Post:
        """Update the provided fields of a post."""
        if title is not None:
            post.title = title
        if content is not None:
            post.content = content
        if tags is not None:
            post.tag_links.clear()
            await self.db.flush()
            post.tag_links.extend(PostTag(tag=tag, position=idx) for idx, tag in enumerate(tags))

        await self.db.flush()
        return await self.get_by_id(post.id)  # type: ignore[return-value]

    async def delete(self, post_id: str) -> bool:
        """Delete a post together with its comments, votes, views and tags."""
        await self.db.execute(delete(Comment).where(Comment.post_id == post_id))
        await self.db.execute(delete(Vote).where(Vote.post_id == post_id))
        await self.db.execute(delete(PostView).where(PostView.post_id == post_id))
        await self.db.execute(delete(PostTag).where(PostTag.post_id == post_id))
        result = await self.db.execute(delete(Post).where(Post.id == post_id))
        return self._get_rowcount(result) > 0

    async def apply_vote_delta(self, post_id: str, delta: int) -> int:
        """
        Add delta to the post's tally in SQL and return the new tally.

        The increment happens in the database so concurrent writers on other
        keys cannot overwrite each other's deltas.
        """
        await self.db.execute(
            update(Post)
            .where(Post.id == post_id)
            # Keep updated_at for edits by the author, not for votes
            .values(upvotes=Post.upvotes + delta, updated_at=Post.updated_at)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(select(Post.upvotes).where(Post.id == post_id))
        return result.scalar() or 0
