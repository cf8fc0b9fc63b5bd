"""Repository modules for database access."""

from repositories.comment_repository import CommentRepository
from repositories.post_repository import PostRepository
from repositories.user_repository import UserRepository
from repositories.view_repository import PostViewRepository
from repositories.vote_repository import VoteRepository

__all__ = [
    "CommentRepository",
    "PostRepository",
    "PostViewRepository",
    "UserRepository",
    "VoteRepository",
]
