"""
Tests for comment API endpoints.
"""

import pytest
from httpx import AsyncClient


@pytest.mark.unit
class TestCommentEndpoints:
    async def test_list_requires_post_id(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/comments")

        assert response.status_code == 400
        assert response.json() == {"detail": "post_id is required", "code": "invalid_argument"}

    async def test_create_requires_auth(self, client: AsyncClient) -> None:
        response = await client.post("/api/v1/comments", json={"post_id": "p", "content": "hi"})

        assert response.status_code == 401

    async def test_create_missing_content(self, client, make_user, make_post, auth_headers_for) -> None:
        user = await make_user()
        post = await make_post(user)

        response = await client.post(
            "/api/v1/comments", json={"post_id": post.id}, headers=auth_headers_for(user)
        )

        assert response.status_code == 400

    async def test_create_on_missing_post(self, client, make_user, auth_headers_for) -> None:
        user = await make_user()

        response = await client.post(
            "/api/v1/comments", json={"post_id": "missing", "content": "hi"}, headers=auth_headers_for(user)
        )

        assert response.status_code == 404

    async def test_thread_shape(self, client, make_user, make_post, auth_headers_for) -> None:
        user = await make_user("commenter")
        post = await make_post(user)
        headers = auth_headers_for(user)

        top = (await client.post(
            "/api/v1/comments", json={"post_id": post.id, "content": "top"}, headers=headers
        )).json()
        reply = await client.post(
            "/api/v1/comments",
            json={"post_id": post.id, "content": "reply", "parent_id": top["id"]},
            headers=headers,
        )
        assert reply.status_code == 201

        response = await client.get("/api/v1/comments", params={"post_id": post.id})

        forest = response.json()
        assert len(forest) == 1
        assert forest[0]["id"] == top["id"]
        assert forest[0]["author"]["username"] == "commenter"
        assert [r["content"] for r in forest[0]["replies"]] == ["reply"]
        assert forest[0]["replies"][0]["replies"] == []

    async def test_reply_to_other_posts_comment(self, client, make_user, make_post, auth_headers_for) -> None:
        user = await make_user()
        post_a = await make_post(user)
        post_b = await make_post(user)
        headers = auth_headers_for(user)
        parent = (await client.post(
            "/api/v1/comments", json={"post_id": post_a.id, "content": "on a"}, headers=headers
        )).json()

        response = await client.post(
            "/api/v1/comments",
            json={"post_id": post_b.id, "content": "on b", "parent_id": parent["id"]},
            headers=headers,
        )

        assert response.status_code == 400

    async def test_delete_own_comment(self, client, make_user, make_post, auth_headers_for) -> None:
        author = await make_user()
        other = await make_user()
        post = await make_post(author)
        created = (await client.post(
            "/api/v1/comments", json={"post_id": post.id, "content": "bye"}, headers=auth_headers_for(author)
        )).json()

        forbidden = await client.delete(f"/api/v1/comments/{created['id']}", headers=auth_headers_for(other))
        deleted = await client.delete(f"/api/v1/comments/{created['id']}", headers=auth_headers_for(author))

        assert forbidden.status_code == 403
        assert deleted.status_code == 200
        assert (await client.get("/api/v1/comments", params={"post_id": post.id})).json() == []

    async def test_deep_reply_chain_lists(self, client, make_user, make_post, auth_headers_for) -> None:
        user = await make_user()
        post = await make_post(user)
        headers = auth_headers_for(user)
        depth = 300
        parent_id = None
        for i in range(depth):
            created = await client.post(
                "/api/v1/comments",
                json={"post_id": post.id, "content": f"level {i}", "parent_id": parent_id},
                headers=headers,
            )
            assert created.status_code == 201
            parent_id = created.json()["id"]

        response = await client.get("/api/v1/comments", params={"post_id": post.id})

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/json"
        forest = response.json()
        assert len(forest) == 1
        node, levels = forest[0], 1
        while node["replies"]:
            assert len(node["replies"]) == 1
            node = node["replies"][0]
            levels += 1
        assert levels == depth
        assert node["content"] == f"level {depth - 1}"
