"""Database models module."""

from models.user import User
from models.post import Post, PostTag
from models.comment import Comment
from models.vote import Vote
from models.post_view import PostView

__all__ = [
    "User",
    "Post",
    "PostTag",
    "Comment",
    "Vote",
    "PostView",
]
