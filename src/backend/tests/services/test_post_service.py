"""
Tests for post validation, ownership rules and the feed.
"""

import base64

import pytest

from core.exceptions import InvalidArgument, NotFound, PermissionDenied
from services.post_service import (
    PostService,
    normalize_tags,
    validate_content,
    validate_image_ref,
    validate_image_refs,
    validate_title,
)


@pytest.mark.unit
class TestNormalizeTags:
    def test_lowercases_trims_and_dedupes_in_order(self) -> None:
        assert normalize_tags([" Go ", "python", "GO", "", "Rust"]) == ["go", "python", "rust"]

    def test_none_is_empty(self) -> None:
        assert normalize_tags(None) == []

    def test_too_many_tags(self) -> None:
        with pytest.raises(InvalidArgument):
            normalize_tags([f"t{i}" for i in range(11)])

    def test_tag_too_long(self) -> None:
        with pytest.raises(InvalidArgument):
            normalize_tags(["x" * 31])


@pytest.mark.unit
class TestImageReferences:
    def test_http_urls_pass(self) -> None:
        assert validate_image_ref("https://cdn.example.com/a.png") == "https://cdn.example.com/a.png"

    def test_small_data_uri_passes(self) -> None:
        uri = "data:image/png;base64," + base64.b64encode(b"\x89PNG....").decode()
        assert validate_image_ref(uri) == uri

    def test_oversized_data_uri_rejected(self) -> None:
        payload = base64.b64encode(b"\0" * (5 * 1024 * 1024 + 1)).decode()
        with pytest.raises(InvalidArgument):
            validate_image_ref("data:image/jpeg;base64," + payload)

    def test_non_image_rejected(self) -> None:
        with pytest.raises(InvalidArgument):
            validate_image_ref("data:text/html;base64,PGI+")

    def test_invalid_base64_rejected(self) -> None:
        with pytest.raises(InvalidArgument):
            validate_image_ref("data:image/png;base64,%%%")

    def test_relative_path_rejected(self) -> None:
        with pytest.raises(InvalidArgument):
            validate_image_ref("/etc/passwd")

    def test_at_most_ten(self) -> None:
        with pytest.raises(InvalidArgument):
            validate_image_refs([f"https://example.com/{i}.png" for i in range(11)])


@pytest.mark.unit
class TestTitleAndContent:
    def test_title_is_trimmed(self) -> None:
        assert validate_title("  Hello  ") == "Hello"

    @pytest.mark.parametrize("title", [None, "", "   ", "x" * 301])
    def test_bad_titles(self, title) -> None:
        with pytest.raises(InvalidArgument):
            validate_title(title)

    @pytest.mark.parametrize("content", [None, "", "  \n "])
    def test_blank_content(self, content) -> None:
        with pytest.raises(InvalidArgument):
            validate_content(content)


@pytest.mark.unit
class TestPostService:
    async def test_create_normalizes_tags(self, db_session, make_user, context_for) -> None:
        author = await make_user()

        post = await PostService(db_session).create_post(
            context_for(author),
            title=" First ",
            content="Body",
            tags=["Go", "go", "Web"],
        )

        assert post.title == "First"
        assert post.tags == ["go", "web"]
        assert post.upvotes == 0
        assert post.author.username == author.username

    async def test_feed_second_page_of_tagged_posts(self, db_session, make_user, make_post) -> None:
        author = await make_user()
        for i in range(25):
            await make_post(author, title=f"Go post {i}", tags=["go"])
        await make_post(author, title="Untagged")

        page = await PostService(db_session).list_posts(tag="go", page=2, page_size=10)

        assert len(page.items) == 10
        assert page.total == 25
        assert page.total_pages == 3
        assert page.has_next is True
        assert page.has_prev is True

    async def test_feed_is_newest_first(self, db_session, make_user, make_post) -> None:
        author = await make_user()
        for i in range(3):
            await make_post(author, title=f"Post {i}")

        page = await PostService(db_session).list_posts()

        assert [p.title for p in page.items] == ["Post 2", "Post 1", "Post 0"]
        assert page.page_size == 8

    async def test_tag_filter_is_case_insensitive(self, db_session, make_user, make_post) -> None:
        author = await make_user()
        await make_post(author, title="tagged", tags=["python"])

        page = await PostService(db_session).list_posts(tag="PyThOn")

        assert [p.title for p in page.items] == ["tagged"]

    async def test_author_filter(self, db_session, make_user, make_post) -> None:
        alice = await make_user("alice")
        bob = await make_user("bob")
        await make_post(alice, title="by alice")
        await make_post(bob, title="by bob")

        page = await PostService(db_session).list_posts(author="bob")

        assert [p.title for p in page.items] == ["by bob"]

    async def test_unknown_author_is_not_found(self, db_session) -> None:
        with pytest.raises(NotFound):
            await PostService(db_session).list_posts(author="ghost")

    async def test_only_author_may_update(self, db_session, make_user, make_post, context_for) -> None:
        author = await make_user()
        other = await make_user()
        post = await make_post(author)

        with pytest.raises(PermissionDenied):
            await PostService(db_session).update_post(context_for(other), post.id, title="Hijacked")

    async def test_update_replaces_tags(self, db_session, make_user, make_post, context_for) -> None:
        author = await make_user()
        post = await make_post(author, tags=["old", "keep"])

        updated = await PostService(db_session).update_post(
            context_for(author), post.id, tags=["Keep", "new"]
        )

        assert updated.tags == ["keep", "new"]
        assert updated.title == post.title

    async def test_delete_by_author(self, db_session, make_user, make_post, context_for) -> None:
        author = await make_user()
        post = await make_post(author, tags=["go"])
        service = PostService(db_session)

        await service.delete_post(context_for(author), post.id)

        with pytest.raises(NotFound):
            await service.get_post(post.id)

    async def test_views_count_once_per_user(self, db_session, make_user, make_post, context_for) -> None:
        author = await make_user()
        viewer = await make_user()
        post = await make_post(author)
        service = PostService(db_session)

        assert await service.record_view(context_for(viewer), post.id) == (1, True)
        assert await service.record_view(context_for(viewer), post.id) == (1, False)
        assert await service.record_view(context_for(author), post.id) == (2, True)
        assert await service.view_count(post.id) == 2
