"""
Comment endpoint tests: adding comments (newest first), removing them
under the comment-author-or-post-author rule, and read-through via the
post detail endpoint.
"""
import pytest
from httpx import AsyncClient


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

async def _create_post(client: AsyncClient, headers: dict) -> int:
    resp = await client.post("/api/blogs", json={"title": "Commentable", "content": "Body"}, headers=headers)
    assert resp.status_code == 201
    return resp.json()["id"]


async def _comment(client: AsyncClient, post_id: int, headers: dict, content: str) -> dict:
    resp = await client.post(f"/api/blogs/{post_id}/comments", json={"content": content}, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


# ---------------------------------------------------------------------------
# Add comment
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_add_comment_returns_comment_with_author(async_client: AsyncClient, register_user):
    _, author = await register_user("Poster", "poster@example.com")
    reader, reader_headers = await register_user("Reader", "reader@example.com")
    post_id = await _create_post(async_client, author)

    comment = await _comment(async_client, post_id, reader_headers, "Great post!")
    assert comment["content"] == "Great post!"
    assert comment["author"] == reader
    assert "id" in comment
    assert "created_at" in comment


@pytest.mark.asyncio
async def test_comments_are_prepended(async_client: AsyncClient, register_user):
    """Each new comment lands at index 0; older ones keep their order."""
    _, headers = await register_user("Chatty", "chatty@example.com")
    post_id = await _create_post(async_client, headers)

    ids = []
    for i in range(3):
        ids.append((await _comment(async_client, post_id, headers, f"Comment {i}"))["id"])

    detail = (await async_client.get(f"/api/blogs/{post_id}")).json()
    assert [c["id"] for c in detail["comments"]] == list(reversed(ids))
    assert [c["content"] for c in detail["comments"]] == ["Comment 2", "Comment 1", "Comment 0"]
    for c in detail["comments"]:
        assert c["author"]["name"] == "Chatty"


@pytest.mark.asyncio
async def test_comment_count_in_listing(async_client: AsyncClient, register_user):
    _, headers = await register_user("Counter", "counter@example.com")
    post_id = await _create_post(async_client, headers)
    for i in range(2):
        await _comment(async_client, post_id, headers, f"c{i}")

    items = (await async_client.get("/api/blogs")).json()
    assert items[0]["comment_count"] == 2


@pytest.mark.asyncio
async def test_comment_on_missing_post(async_client: AsyncClient, register_user):
    _, headers = await register_user("Lost", "lost@example.com")
    resp = await async_client.post("/api/blogs/99999/comments", json={"content": "hello"}, headers=headers)
    assert resp.status_code == 404


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [{}, {"content": ""}, {"content": "   "}])
async def test_comment_requires_content(async_client: AsyncClient, register_user, payload):
    _, headers = await register_user("Blank", "blank@example.com")
    post_id = await _create_post(async_client, headers)
    resp = await async_client.post(f"/api/blogs/{post_id}/comments", json=payload, headers=headers)
    assert resp.status_code == 400
    assert resp.json()["errors"][0]["field"] == "content"


@pytest.mark.asyncio
async def test_comment_requires_token(async_client: AsyncClient, register_user):
    _, headers = await register_user("Anon", "anon@example.com")
    post_id = await _create_post(async_client, headers)
    resp = await async_client.post(f"/api/blogs/{post_id}/comments", json={"content": "hi"})
    assert resp.status_code == 401


# ---------------------------------------------------------------------------
# Delete comment
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
@pytest.mark.parametrize("deleter", ["comment_author", "post_author"])
async def test_comment_author_or_post_author_may_delete(async_client: AsyncClient, register_user, deleter):
    _, post_author = await register_user("U2", "u2@example.com")
    _, comment_author = await register_user("U1", "u1@example.com")
    post_id = await _create_post(async_client, post_author)

    first = await _comment(async_client, post_id, post_author, "first")
    target = await _comment(async_client, post_id, comment_author, "target")
    last = await _comment(async_client, post_id, post_author, "last")

    headers = comment_author if deleter == "comment_author" else post_author
    resp = await async_client.delete(f"/api/blogs/{post_id}/comments/{target['id']}", headers=headers)
    assert resp.status_code == 200
    assert "message" in resp.json()

    remaining = [c["id"] for c in (await async_client.get(f"/api/blogs/{post_id}")).json()["comments"]]
    assert remaining == [last["id"], first["id"]]


@pytest.mark.asyncio
async def test_third_party_cannot_delete_comment(async_client: AsyncClient, register_user):
    _, post_author = await register_user("Pat", "p@example.com")
    _, comment_author = await register_user("Cam", "c@example.com")
    _, stranger = await register_user("Sam", "s@example.com")
    post_id = await _create_post(async_client, post_author)
    target = await _comment(async_client, post_id, comment_author, "mine")

    resp = await async_client.delete(f"/api/blogs/{post_id}/comments/{target['id']}", headers=stranger)
    assert resp.status_code == 403

    comments = (await async_client.get(f"/api/blogs/{post_id}")).json()["comments"]
    assert [c["id"] for c in comments] == [target["id"]]


@pytest.mark.asyncio
async def test_delete_missing_comment(async_client: AsyncClient, register_user):
    _, headers = await register_user("Nobody", "nobody@example.com")
    post_id = await _create_post(async_client, headers)
    resp = await async_client.delete(f"/api/blogs/{post_id}/comments/99999", headers=headers)
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_delete_comment_on_missing_post(async_client: AsyncClient, register_user):
    _, headers = await register_user("Nowhere", "nowhere@example.com")
    resp = await async_client.delete("/api/blogs/99999/comments/1", headers=headers)
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_comment_id_is_scoped_to_its_post(async_client: AsyncClient, register_user):
    """A comment cannot be removed through a different post's URL."""
    _, headers = await register_user("Scoped", "scoped@example.com")
    post_a = await _create_post(async_client, headers)
    post_b = await _create_post(async_client, headers)
    comment = await _comment(async_client, post_a, headers, "on A")

    resp = await async_client.delete(f"/api/blogs/{post_b}/comments/{comment['id']}", headers=headers)
    assert resp.status_code == 404

    comments = (await async_client.get(f"/api/blogs/{post_a}")).json()["comments"]
    assert [c["id"] for c in comments] == [comment["id"]]


@pytest.mark.asyncio
async def test_out_of_range_ids_are_not_found(async_client: AsyncClient, register_user):
    _, headers = await register_user("Range", "range@example.com")
    post_id = await _create_post(async_client, headers)
    huge = 2**31

    resp = await async_client.post(f"/api/blogs/{huge}/comments", json={"content": "hi"}, headers=headers)
    assert resp.status_code == 404
    resp = await async_client.delete(f"/api/blogs/{post_id}/comments/{huge}", headers=headers)
    assert resp.status_code == 404
    resp = await async_client.delete(f"/api/blogs/{huge}/comments/1", headers=headers)
    assert resp.status_code == 404
