"""
File: tests/integration/test_users_router.py
Description: 用户接口集成测试

1. 资料读取 / 修改 (只能改自己)
2. 路径参数非法、用户不存在
3. 主页聚合：帖子、所在小组、帖子流分页、统计

Author: jinmozhe
Created: 2026-03-10
"""

import pytest
from httpx import AsyncClient

from app.db.models import GroupMember, Post

USERS = "/api/users"


@pytest.mark.asyncio
async def test_read_user(client: AsyncClient, make_user) -> None:
    user = await make_user("alice", bio="hi")

    response = await client.get(f"{USERS}/{user.id}")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["username"] == "alice"
    assert data["bio"] == "hi"
    assert "password" not in data


@pytest.mark.asyncio
async def test_read_user_not_found_and_bad_id(client: AsyncClient) -> None:
    missing = await client.get(f"{USERS}/999")
    assert missing.status_code == 404
    assert missing.json()["code"] == "users.not_found"

    bad = await client.get(f"{USERS}/abc")
    assert bad.status_code == 400
    assert bad.json()["code"] == "system.invalid_params"


@pytest.mark.asyncio
async def test_update_own_profile(client: AsyncClient, make_user, auth_headers) -> None:
    user = await make_user("alice")

    response = await client.patch(
        f"{USERS}/{user.id}",
        json={"bio": "new bio", "profile_layout": "grid", "accent_color": "#ff0000"},
        headers=auth_headers(user),
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["bio"] == "new bio"
    assert data["profile_layout"] == "grid"
    assert data["accent_color"] == "#ff0000"

    again = await client.get(f"{USERS}/{user.id}")
    assert again.json()["data"]["bio"] == "new bio"


@pytest.mark.asyncio
async def test_update_other_profile_forbidden(
    client: AsyncClient, make_user, auth_headers
) -> None:
    alice = await make_user("alice")
    bob = await make_user("bob")

    response = await client.patch(
        f"{USERS}/{bob.id}", json={"bio": "pwned"}, headers=auth_headers(alice)
    )

    assert response.status_code == 403
    assert response.json()["code"] == "users.not_owner"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [{"is_admin": True}, {"username": "root"}, {"theme": None}],
)
async def test_update_rejects_protected_fields(
    client: AsyncClient, make_user, auth_headers, payload
) -> None:
    user = await make_user("alice")

    response = await client.patch(
        f"{USERS}/{user.id}", json=payload, headers=auth_headers(user)
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_profile_aggregates(
    client: AsyncClient, make_user, make_group, session_factory, auth_headers
) -> None:
    alice = await make_user("alice")
    bob = await make_user("bob")
    joined = await make_group("Joined")
    other = await make_group("Other")

    async with session_factory() as session:
        session.add_all(
            [
                GroupMember(group_id=joined.id, user_id=alice.id),
                GroupMember(group_id=joined.id, user_id=bob.id),
                GroupMember(group_id=other.id, user_id=bob.id),
            ]
        )
        await session.commit()
        session.add_all(
            [
                Post(content="a1", user_id=alice.id, group_id=joined.id),
                Post(content="b1", user_id=bob.id, group_id=joined.id),
                Post(content="b2", user_id=bob.id, group_id=other.id),
            ]
        )
        await session.commit()

    posts = (await client.get(f"{USERS}/{alice.id}/posts")).json()["data"]
    assert [p["content"] for p in posts] == ["a1"]

    groups = (await client.get(f"{USERS}/{alice.id}/groups")).json()["data"]
    assert [g["id"] for g in groups] == [joined.id]

    my_groups = await client.get(f"{USERS}/me/groups", headers=auth_headers(bob))
    assert [g["id"] for g in my_groups.json()["data"]] == [joined.id, other.id]

    feed = (await client.get(f"{USERS}/{alice.id}/group-posts")).json()["data"]
    assert sorted(p["content"] for p in feed) == ["a1", "b1"]

    page = await client.get(
        f"{USERS}/{alice.id}/group-posts", params={"limit": 1, "offset": 1}
    )
    assert len(page.json()["data"]) == 1

    stats = (await client.get(f"{USERS}/{bob.id}/stats")).json()["data"]
    assert stats == {
        "post_count": 2,
        "friend_count": 0,
        "follower_count": 0,
        "following_count": 0,
    }


@pytest.mark.asyncio
@pytest.mark.parametrize("params", [{"limit": 0}, {"limit": 101}, {"offset": -1}])
async def test_group_posts_pagination_bounds(
    client: AsyncClient, make_user, params
) -> None:
    user = await make_user("alice")

    response = await client.get(f"{USERS}/{user.id}/group-posts", params=params)

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_aggregates_for_missing_user(client: AsyncClient) -> None:
    for suffix in ("posts", "group-posts", "groups", "stats"):
        response = await client.get(f"{USERS}/999/{suffix}")
        assert response.status_code == 404
