"""
Post Service

Validation and ownership rules for posts, plus the paginated feed.
Route handlers stay thin and call into this module.
"""

import base64
import binascii
import re
from typing import Optional, Sequence

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.context import RequestContext
from core.exceptions import InvalidArgument, NotFound, PermissionDenied
from core.timeouts import run_with_timeout
from models.post import Post
from repositories.post_repository import PostRepository
from repositories.user_repository import UserRepository
from repositories.view_repository import PostViewRepository
from schemas.common import Page
from schemas.converters import post_model_to_schema
from services.pagination import build_page, validate_page_params

logger = structlog.get_logger(__name__)

_DATA_URI = re.compile(r"^data:image/[A-Za-z0-9.+-]+;base64,(?P<payload>.*)$", re.DOTALL)


def normalize_tags(tags: Optional[Sequence[str]]) -> list[str]:
    """
    Trim, lower-case and de-duplicate tags, keeping first-seen order.

    Blank tags are dropped.
    """
    normalized: list[str] = []
    seen: set[str] = set()
    for raw in tags or []:
        tag = raw.strip().lower()
        if not tag or tag in seen:
            continue
        if len(tag) > settings.MAX_TAG_LENGTH:
            raise InvalidArgument(f"Tags must be at most {settings.MAX_TAG_LENGTH} characters")
        seen.add(tag)
        normalized.append(tag)

    if len(normalized) > settings.MAX_TAGS_PER_POST:
        raise InvalidArgument(f"A post can have at most {settings.MAX_TAGS_PER_POST} tags")
    return normalized


def validate_image_ref(ref: str) -> str:
    """Accept an http(s) URL or a base64 image data URI within the size limit."""
    ref = ref.strip()
    if ref.startswith(("http://", "https://")):
        return ref

    match = _DATA_URI.match(ref)
    if not match:
        raise InvalidArgument("Images must be http(s) URLs or data:image base64 URIs")

    try:
        payload = base64.b64decode(match.group("payload"), validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidArgument("Image data is not valid base64") from e

    if len(payload) > settings.MAX_IMAGE_BYTES:
        limit_mb = settings.MAX_IMAGE_BYTES // (1024 * 1024)
        raise InvalidArgument(f"Each image must be at most {limit_mb}MB")
    return ref


def validate_image_refs(refs: Optional[Sequence[str]]) -> list[str]:
    refs = list(refs or [])
    if len(refs) > settings.MAX_IMAGES_PER_POST:
        raise InvalidArgument(f"A post can have at most {settings.MAX_IMAGES_PER_POST} images")
    return [validate_image_ref(ref) for ref in refs]


def validate_title(title: Optional[str]) -> str:
    title = (title or "").strip()
    if not title:
        raise InvalidArgument("Title is required")
    if len(title) > settings.MAX_TITLE_LENGTH:
        raise InvalidArgument(f"Title must be at most {settings.MAX_TITLE_LENGTH} characters")
    return title


def validate_content(content: Optional[str]) -> str:
    if content is None or not content.strip():
        raise InvalidArgument("Content is required")
    return content


class PostService:
    """Post operations on one request's session."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.posts = PostRepository(db)
        self.users = UserRepository(db)
        self.views = PostViewRepository(db)

    async def list_posts(
        self,
        tag: Optional[str] = None,
        author: Optional[str] = None,
        page: int = 1,
        page_size: Optional[int] = None,
    ) -> Page:
        """
        Newest-first feed, optionally filtered by tag and author username.

        Raises NotFound when the author filter names no user.
        """
        page, page_size = validate_page_params(page, page_size or settings.DEFAULT_PAGE_SIZE)
        return await run_with_timeout(
            self._list_posts(tag, author, page, page_size),
            operation="list_posts",
        )

    async def _list_posts(
        self,
        tag: Optional[str],
        author: Optional[str],
        page: int,
        page_size: int,
    ) -> Page:
        author_id = None
        if author:
            user = await self.users.get_by_username(author)
            if not user:
                raise NotFound("User not found")
            author_id = user.id

        items, total = await self.posts.list_posts(
            page=page,
            per_page=page_size,
            tag=tag.strip() if tag else None,
            author_id=author_id,
        )
        return build_page([post_model_to_schema(p) for p in items], total, page, page_size)

    async def get_post(self, post_id: str) -> Post:
        post = await self.posts.get_by_id(post_id)
        if not post:
            raise NotFound("Post not found")
        return post

    async def create_post(
        self,
        ctx: RequestContext,
        title: Optional[str],
        content: Optional[str],
        tags: Optional[Sequence[str]] = None,
        image_urls: Optional[Sequence[str]] = None,
    ) -> Post:
        post = await self.posts.create(
            user_id=ctx.user_id,
            title=validate_title(title),
            content=validate_content(content),
            tags=normalize_tags(tags),
            image_urls=validate_image_refs(image_urls),
        )
        logger.info("post_created", post_id=post.id, user_id=ctx.user_id, request_id=ctx.request_id)
        return post

    async def _get_owned(self, ctx: RequestContext, post_id: str) -> Post:
        post = await self.get_post(post_id)
        if post.user_id != ctx.user_id:
            raise PermissionDenied("Only the author can modify this post")
        return post

    async def update_post(
        self,
        ctx: RequestContext,
        post_id: str,
        title: Optional[str] = None,
        content: Optional[str] = None,
        tags: Optional[Sequence[str]] = None,
    ) -> Post:
        post = await self._get_owned(ctx, post_id)
        updated = await self.posts.update(
            post,
            title=validate_title(title) if title is not None else None,
            content=validate_content(content) if content is not None else None,
            tags=normalize_tags(tags) if tags is not None else None,
        )
        logger.info("post_updated", post_id=post_id, user_id=ctx.user_id, request_id=ctx.request_id)
        return updated

    async def delete_post(self, ctx: RequestContext, post_id: str) -> None:
        await self._get_owned(ctx, post_id)
        await self.posts.delete(post_id)
        logger.info("post_deleted", post_id=post_id, user_id=ctx.user_id, request_id=ctx.request_id)

    async def record_view(self, ctx: RequestContext, post_id: str) -> tuple[int, bool]:
        """Record one view per viewer; returns (views, is_new_view)."""
        if not await self.posts.exists(post_id):
            raise NotFound("Post not found")
        is_new = await self.views.record(post_id, ctx.user_id)
        return await self.views.count_by_post(post_id), is_new

    async def view_count(self, post_id: str) -> int:
        if not await self.posts.exists(post_id):
            raise NotFound("Post not found")
        return await self.views.count_by_post(post_id)
