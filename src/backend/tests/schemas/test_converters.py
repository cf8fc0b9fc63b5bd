"""Tests for the schema converters."""

import json
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from schemas.converters import (
    comment_forest_to_json,
    comment_model_to_schema,
    post_model_to_schema,
    user_model_to_public,
    user_model_to_response,
)
from services.comment_tree import CommentNode


@pytest.fixture
def mock_user():
    user = MagicMock()
    user.id = "user-1"
    user.username = "alice"
    user.email = "alice@example.com"
    user.avatar_url = None
    user.bio = "hi"
    user.created_at = datetime.now(timezone.utc)
    return user


class TestPostModelToSchema:
    @pytest.fixture
    def mock_post(self, mock_user):
        post = MagicMock()
        post.id = "post-1"
        post.title = "Title"
        post.content = "Body"
        post.image_urls = None
        post.tags = ["go", "web"]
        post.upvotes = -3
        post.author = mock_user
        post.created_at = datetime.now(timezone.utc)
        post.updated_at = None
        return post

    def test_fields_are_copied(self, mock_post) -> None:
        result = post_model_to_schema(mock_post)

        assert result.id == "post-1"
        assert result.tags == ["go", "web"]
        assert result.upvotes == -3
        assert result.image_urls == []
        assert result.author.username == "alice"

    def test_missing_author(self, mock_post) -> None:
        mock_post.author = None

        assert post_model_to_schema(mock_post).author is None


class TestCommentConverters:
    @pytest.fixture
    def mock_comment(self, mock_user):
        comment = MagicMock()
        comment.id = "c-1"
        comment.post_id = "post-1"
        comment.parent_id = None
        comment.content = "Nice"
        comment.author = mock_user
        comment.created_at = datetime.now(timezone.utc)
        return comment

    def test_flat_schema(self, mock_comment) -> None:
        result = comment_model_to_schema(mock_comment)

        assert result.id == "c-1"
        assert result.author.id == "user-1"

    def test_forest_json_nests_replies(self, mock_comment, mock_user) -> None:
        reply = MagicMock()
        reply.id = "c-2"
        reply.post_id = "post-1"
        reply.parent_id = "c-1"
        reply.content = "Thanks"
        reply.author = mock_user
        reply.created_at = datetime.now(timezone.utc)
        roots = [CommentNode(comment=mock_comment, replies=[CommentNode(comment=reply)]), CommentNode(comment=reply)]

        forest = json.loads(comment_forest_to_json(roots))

        assert [node["id"] for node in forest] == ["c-1", "c-2"]
        assert forest[0]["author"]["username"] == "alice"
        assert forest[0]["replies"][0]["content"] == "Thanks"
        assert forest[0]["replies"][0]["replies"] == []
        assert forest[1]["replies"] == []

    def test_forest_json_empty(self) -> None:
        assert comment_forest_to_json([]) == "[]"

    def test_forest_json_handles_very_deep_chain(self, mock_comment) -> None:
        depth = 5000
        root = CommentNode(comment=mock_comment)
        node = root
        for _ in range(depth - 1):
            child = CommentNode(comment=mock_comment)
            node.replies.append(child)
            node = child

        rendered = comment_forest_to_json([root])

        assert rendered.count('"replies":[') == depth
        assert rendered.endswith("[]" + "}]" * (depth - 1) + "}]")


class TestUserConverters:
    def test_public_profile_hides_email(self, mock_user) -> None:
        result = user_model_to_public(mock_user)

        assert "email" not in result.model_dump()
        assert result.bio == "hi"

    def test_own_profile_includes_email(self, mock_user) -> None:
        assert user_model_to_response(mock_user).email == "alice@example.com"
