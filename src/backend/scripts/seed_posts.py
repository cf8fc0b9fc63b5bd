"""
Seed script to create demo users, posts and comments for development.
Run with: python -m scripts.seed_posts

Set DB_AUTO_CREATE=true (or run against a migrated database) so the tables exist.
"""

import asyncio

import scripts._common  # noqa: F401
from sqlalchemy import select

from core.config import settings
from core.context import RequestContext
from core.logging import configure_logging
from db.session import close_db, get_session_factory, init_db
from models.post import Post
from repositories.user_repository import UserRepository
from services.comment_service import CommentService
from services.post_service import PostService
from services.vote_ledger import VoteLedger


SEED_USERS = [
    {"email": "ada@example.com", "username": "ada", "bio": "Writes about compilers."},
    {"email": "linus@example.com", "username": "linus_t", "bio": "Kernel hacker."},
    {"email": "grace@example.com", "username": "grace_h", "bio": None},
]

SEED_POSTS = [
    {
        "author": "ada",
        "title": "Writing a tiny parser in Python",
        "content": "Recursive descent is still the friendliest way to start.\n\n```python\ndef parse(): ...\n```",
        "tags": ["python", "parsing"],
    },
    {
        "author": "linus_t",
        "title": "Why I keep my commits small",
        "content": "Small commits are easier to review and easier to revert.",
        "tags": ["git", "workflow"],
    },
    {
        "author": "grace_h",
        "title": "Debugging stories",
        "content": "Share the strangest bug you ever chased.",
        "tags": ["debugging", "stories"],
    },
]


async def seed_posts() -> None:
    """Create seed content in the configured database."""
    configure_logging()
    await init_db(create_tables=settings.DB_AUTO_CREATE)

    async with get_session_factory()() as session:
        result = await session.execute(select(Post).limit(1))
        if result.scalar_one_or_none():
            print("Posts already exist in database. Skipping seed.")
            return

        users = UserRepository(session)
        contexts: dict[str, RequestContext] = {}
        for data in SEED_USERS:
            user = await users.get_by_username(data["username"]) or await users.create(**data)
            contexts[user.username] = RequestContext(user_id=user.id, username=user.username)

        posts = PostService(session)
        comments = CommentService(session)
        created = []
        for data in SEED_POSTS:
            post = await posts.create_post(
                contexts[data["author"]],
                title=data["title"],
                content=data["content"],
                tags=data["tags"],
            )
            created.append(post)
            print(f"Created post: {post.title[:50]}")

        await session.commit()

        # A short thread and a few votes on the first post
        first = created[0]
        question = await comments.create_comment(contexts["linus_t"], first.id, "Do you handle precedence?")
        await comments.create_comment(
            contexts["ada"], first.id, "Yes, with one function per level.", parent_id=question.id
        )
        await session.commit()

        ledger = VoteLedger(session)
        for username in ("linus_t", "grace_h"):
            await ledger.cast_vote(contexts[username], first.id, 1)

        print(f"\n✅ Created {len(created)} posts successfully!")

    await close_db()


if __name__ == "__main__":
    asyncio.run(seed_posts())
