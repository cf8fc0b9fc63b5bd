"""
Schema converter functions.

Centralized helper functions for converting SQLAlchemy models to Pydantic schemas.
These are the single source of truth for model-to-schema conversions.
"""

from typing import TYPE_CHECKING, Optional, Sequence

from schemas.comment import CommentResponse
from schemas.post import PostResponse
from schemas.user import AuthorSummary, PublicProfile, UserInDB, UserResponse

if TYPE_CHECKING:
    from models.comment import Comment as CommentModel
    from models.post import Post as PostModel
    from models.user import User as UserModel
    from services.comment_tree import CommentNode


def author_summary(user: Optional["UserModel"]) -> Optional[AuthorSummary]:
    if user is None:
        return None
    return AuthorSummary(id=str(user.id), username=user.username, avatar_url=user.avatar_url)


def user_model_to_in_db(user: "UserModel") -> UserInDB:
    """Convert a User model to the internal schema used by request handlers."""
    return UserInDB(
        id=str(user.id),
        email=user.email,
        username=user.username,
        avatar_url=user.avatar_url,
        bio=user.bio,
        created_at=user.created_at,
    )


def user_model_to_public(user: "UserModel") -> PublicProfile:
    return PublicProfile(
        id=str(user.id),
        username=user.username,
        avatar_url=user.avatar_url,
        bio=user.bio,
        created_at=user.created_at,
    )


def user_model_to_response(user: "UserModel") -> UserResponse:
    return UserResponse(
        id=str(user.id),
        username=user.username,
        email=user.email,
        avatar_url=user.avatar_url,
        bio=user.bio,
        created_at=user.created_at,
    )


def post_model_to_schema(post: "PostModel") -> PostResponse:
    """
    Convert a Post model to the client-facing schema.

    Tags come back in the order the author gave them.
    """
    return PostResponse(
        id=str(post.id),
        title=post.title,
        content=post.content,
        image_urls=list(post.image_urls or []),
        tags=post.tags,
        upvotes=post.upvotes or 0,
        author=author_summary(post.author),
        created_at=post.created_at,
        updated_at=post.updated_at,
    )


def comment_model_to_schema(comment: "CommentModel") -> CommentResponse:
    return CommentResponse(
        id=str(comment.id),
        post_id=str(comment.post_id),
        parent_id=comment.parent_id,
        content=comment.content,
        author=author_summary(comment.author),
        created_at=comment.created_at,
    )


def comment_forest_to_json(roots: Sequence["CommentNode"]) -> str:
    """
    Render a comment forest as the JSON of `list[CommentThread]`.

    Threads can nest without limit, so the forest is walked with an
    explicit stack; each node's own fields are encoded by CommentResponse.
    """
    parts = ["["]
    stack: list[tuple[Sequence["CommentNode"], int]] = [(roots, 0)]
    while stack:
        nodes, position = stack[-1]
        if position == len(nodes):
            stack.pop()
            parts.append("]")
            if stack:
                # Closes the node that owned this replies list
                parts.append("}")
            continue

        stack[-1] = (nodes, position + 1)
        if position:
            parts.append(",")
        node = nodes[position]
        fields = comment_model_to_schema(node.comment).model_dump_json()
        parts.append(fields[:-1] + ',"replies":[')
        stack.append((node.replies, 0))

    return "".join(parts)
