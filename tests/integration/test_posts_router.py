"""
File: tests/integration/test_posts_router.py
Description: 帖子接口集成测试

1. 修改 / 删除：非作者与不存在返回同一错误
2. 评论：最早在前，带作者信息
3. 点赞：toggle 与计数器、liked 查询
4. 表情回应：添加幂等、聚合计数、移除

Author: jinmozhe
Created: 2026-03-10
"""

import pytest
import pytest_asyncio
from httpx import AsyncClient

from app.db.models import Post

POSTS = "/api/posts"


@pytest_asyncio.fixture
async def post_of_alice(make_user, make_group, session_factory):
    alice = await make_user("alice")
    group = await make_group("Tech")
    async with session_factory() as session:
        post = Post(content="original", user_id=alice.id, group_id=group.id)
        session.add(post)
        await session.commit()
    return alice, post


@pytest.mark.asyncio
async def test_update_post(client: AsyncClient, post_of_alice, auth_headers) -> None:
    alice, post = post_of_alice

    response = await client.patch(
        f"{POSTS}/{post.id}", json={"content": "edited"}, headers=auth_headers(alice)
    )

    assert response.status_code == 200
    assert response.json()["data"]["content"] == "edited"


@pytest.mark.asyncio
async def test_update_post_by_other_user(
    client: AsyncClient, post_of_alice, make_user, auth_headers, session_factory
) -> None:
    _, post = post_of_alice
    bob = await make_user("bob")

    foreign = await client.patch(
        f"{POSTS}/{post.id}", json={"content": "mine now"}, headers=auth_headers(bob)
    )
    missing = await client.patch(
        f"{POSTS}/999", json={"content": "ghost"}, headers=auth_headers(bob)
    )

    # 不存在与非作者无法区分
    assert foreign.status_code == missing.status_code == 404
    assert foreign.json()["code"] == missing.json()["code"] == "posts.not_found_or_forbidden"

    async with session_factory() as session:
        stored = await session.get(Post, post.id)
    assert stored.content == "original"


@pytest.mark.asyncio
async def test_delete_post(
    client: AsyncClient, post_of_alice, make_user, auth_headers
) -> None:
    alice, post = post_of_alice
    bob = await make_user("bob")
    await client.post(
        f"{POSTS}/{post.id}/comments", json={"content": "hi"}, headers=auth_headers(bob)
    )
    await client.post(f"{POSTS}/{post.id}/like", headers=auth_headers(bob))

    denied = await client.delete(f"{POSTS}/{post.id}", headers=auth_headers(bob))
    assert denied.status_code == 404

    deleted = await client.delete(f"{POSTS}/{post.id}", headers=auth_headers(alice))
    assert deleted.status_code == 200

    comments = await client.get(f"{POSTS}/{post.id}/comments")
    assert comments.status_code == 404
    assert comments.json()["code"] == "posts.not_found"


@pytest.mark.asyncio
async def test_comments(client: AsyncClient, post_of_alice, make_user, auth_headers) -> None:
    alice, post = post_of_alice
    bob = await make_user("bob")

    created = await client.post(
        f"{POSTS}/{post.id}/comments", json={"content": "first"}, headers=auth_headers(bob)
    )
    assert created.status_code == 201
    assert created.json()["data"]["author"]["username"] == "bob"

    await client.post(
        f"{POSTS}/{post.id}/comments",
        json={"content": "second"},
        headers=auth_headers(alice),
    )

    comments = (await client.get(f"{POSTS}/{post.id}/comments")).json()["data"]
    assert [c["content"] for c in comments] == ["first", "second"]
    assert [c["author"]["username"] for c in comments] == ["bob", "alice"]

    blank = await client.post(
        f"{POSTS}/{post.id}/comments", json={"content": "   "}, headers=auth_headers(bob)
    )
    assert blank.status_code == 400


@pytest.mark.asyncio
async def test_toggle_like(client: AsyncClient, post_of_alice, make_user, auth_headers) -> None:
    _, post = post_of_alice
    bob = await make_user("bob")
    headers = auth_headers(bob)

    liked = (await client.post(f"{POSTS}/{post.id}/like", headers=headers)).json()["data"]
    assert liked == {"post_id": post.id, "liked": True, "like_count": 1}
    assert (await client.get(f"{POSTS}/{post.id}/liked", headers=headers)).json()["data"] is True

    unliked = (await client.post(f"{POSTS}/{post.id}/like", headers=headers)).json()["data"]
    assert unliked == {"post_id": post.id, "liked": False, "like_count": 0}
    assert (await client.get(f"{POSTS}/{post.id}/liked", headers=headers)).json()["data"] is False


@pytest.mark.asyncio
async def test_like_missing_post(client: AsyncClient, make_user, auth_headers) -> None:
    bob = await make_user("bob")

    response = await client.post(f"{POSTS}/999/like", headers=auth_headers(bob))

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_reactions(client: AsyncClient, post_of_alice, make_user, auth_headers) -> None:
    alice, post = post_of_alice
    bob = await make_user("bob")

    for user, emoji in ((bob, "👍"), (bob, "👍"), (alice, "👍"), (alice, "🎉")):
        response = await client.post(
            f"{POSTS}/{post.id}/reactions", json={"emoji": emoji}, headers=auth_headers(user)
        )
        assert response.status_code == 201

    data = (await client.get(f"{POSTS}/{post.id}/reactions")).json()["data"]
    assert len(data["reactions"]) == 3
    assert data["summary"] == [{"emoji": "👍", "count": 2}, {"emoji": "🎉", "count": 1}]

    removed = await client.delete(
        f"{POSTS}/{post.id}/reactions", params={"emoji": "👍"}, headers=auth_headers(bob)
    )
    assert removed.status_code == 200
    assert removed.json()["data"]["summary"] == [
        {"emoji": "🎉", "count": 1},
        {"emoji": "👍", "count": 1},
    ]


@pytest.mark.asyncio
async def test_write_routes_require_auth(client: AsyncClient, post_of_alice) -> None:
    _, post = post_of_alice

    assert (await client.post(f"{POSTS}/{post.id}/like")).status_code == 401
    assert (
        await client.post(f"{POSTS}/{post.id}/comments", json={"content": "x"})
    ).status_code == 401
    assert (await client.delete(f"{POSTS}/{post.id}")).status_code == 401
