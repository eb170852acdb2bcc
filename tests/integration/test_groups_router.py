"""
File: tests/integration/test_groups_router.py
Description: 小组接口集成测试

1. 小组列表 / 创建 (仅管理员) / 详情
2. 加入、退出、成员管理的权限
3. 发帖与聊天需要成员资格

Author: jinmozhe
Created: 2026-03-10
"""

import pytest
from httpx import AsyncClient

GROUPS = "/api/groups"

GROUP_PAYLOAD = {"name": "Tech", "description": "Talk tech", "category": "Career"}


@pytest.mark.asyncio
async def test_create_group_requires_admin(
    client: AsyncClient, make_user, auth_headers
) -> None:
    user = await make_user("alice")
    admin = await make_user("root", is_admin=True)

    anonymous = await client.post(GROUPS, json=GROUP_PAYLOAD)
    assert anonymous.status_code == 401

    forbidden = await client.post(GROUPS, json=GROUP_PAYLOAD, headers=auth_headers(user))
    assert forbidden.status_code == 403
    assert forbidden.json()["code"] == "system.forbidden"

    created = await client.post(GROUPS, json=GROUP_PAYLOAD, headers=auth_headers(admin))
    assert created.status_code == 201
    group = created.json()["data"]
    assert group["name"] == "Tech"
    assert group["is_private"] is False

    listed = (await client.get(GROUPS)).json()["data"]
    assert [g["id"] for g in listed] == [group["id"]]


@pytest.mark.asyncio
async def test_group_detail(client: AsyncClient, make_user, make_group, auth_headers) -> None:
    user = await make_user("alice")
    group = await make_group("Tech")
    headers = auth_headers(user)

    await client.post(f"{GROUPS}/{group.id}/join", headers=headers)
    await client.post(
        f"{GROUPS}/{group.id}/posts", json={"content": "first"}, headers=headers
    )
    await client.post(
        f"{GROUPS}/{group.id}/posts", json={"content": "second"}, headers=headers
    )
    await client.post(f"{GROUPS}/{group.id}/chat", json={"message": "hey"}, headers=headers)

    response = await client.get(f"{GROUPS}/{group.id}")

    assert response.status_code == 200
    detail = response.json()["data"]
    assert detail["name"] == "Tech"
    assert [p["content"] for p in detail["posts"]] == ["second", "first"]
    assert [m["user"]["username"] for m in detail["members"]] == ["alice"]
    assert [c["message"] for c in detail["chat_messages"]] == ["hey"]


@pytest.mark.asyncio
async def test_group_not_found(client: AsyncClient) -> None:
    response = await client.get(f"{GROUPS}/999")

    assert response.status_code == 404
    assert response.json()["code"] == "groups.not_found"


@pytest.mark.asyncio
async def test_join_and_leave(client: AsyncClient, make_user, make_group, auth_headers) -> None:
    user = await make_user("alice")
    group = await make_group("Tech")
    headers = auth_headers(user)

    first = (await client.post(f"{GROUPS}/{group.id}/join", headers=headers)).json()
    second = (await client.post(f"{GROUPS}/{group.id}/join", headers=headers)).json()
    assert (first["data"]["is_member"], first["data"]["changed"]) == (True, True)
    assert (second["data"]["is_member"], second["data"]["changed"]) == (True, False)

    members = (await client.get(f"{GROUPS}/{group.id}/members")).json()["data"]
    assert [m["user_id"] for m in members] == [user.id]

    left = (await client.post(f"{GROUPS}/{group.id}/leave", headers=headers)).json()
    assert (left["data"]["is_member"], left["data"]["changed"]) == (False, True)

    members = (await client.get(f"{GROUPS}/{group.id}/members")).json()["data"]
    assert members == []


@pytest.mark.asyncio
async def test_join_missing_group(client: AsyncClient, make_user, auth_headers) -> None:
    user = await make_user("alice")

    response = await client.post(f"{GROUPS}/999/join", headers=auth_headers(user))

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_posting_requires_membership(
    client: AsyncClient, make_user, make_group, auth_headers
) -> None:
    user = await make_user("alice")
    group = await make_group("Tech")
    headers = auth_headers(user)

    outsider_post = await client.post(
        f"{GROUPS}/{group.id}/posts", json={"content": "hi"}, headers=headers
    )
    assert outsider_post.status_code == 403
    assert outsider_post.json()["code"] == "groups.not_member"

    outsider_chat = await client.post(
        f"{GROUPS}/{group.id}/chat", json={"message": "hi"}, headers=headers
    )
    assert outsider_chat.status_code == 403

    await client.post(f"{GROUPS}/{group.id}/join", headers=headers)

    created = await client.post(
        f"{GROUPS}/{group.id}/posts",
        json={
            "content": "look",
            "post_type": "video",
            "media_url": "https://youtu.be/dQw4w9WgXcQ",
        },
        headers=headers,
    )
    assert created.status_code == 201
    post = created.json()["data"]
    assert post["video_url"] == "https://youtu.be/dQw4w9WgXcQ"
    assert post["like_count"] == 0
    assert post["user_id"] == user.id

    posts = (await client.get(f"{GROUPS}/{group.id}/posts")).json()["data"]
    assert [p["id"] for p in posts] == [post["id"]]


@pytest.mark.asyncio
async def test_post_validation(
    client: AsyncClient, make_user, make_group, auth_headers
) -> None:
    user = await make_user("alice")
    group = await make_group("Tech")
    headers = auth_headers(user)
    await client.post(f"{GROUPS}/{group.id}/join", headers=headers)

    response = await client.post(
        f"{GROUPS}/{group.id}/posts",
        json={"content": "pic", "post_type": "image"},
        headers=headers,
    )

    assert response.status_code == 400
    assert response.json()["code"] == "system.invalid_params"


@pytest.mark.asyncio
async def test_chat_oldest_first(client: AsyncClient, make_user, make_group, auth_headers) -> None:
    alice = await make_user("alice")
    bob = await make_user("bob")
    group = await make_group("Tech")

    for user, text in ((alice, "one"), (bob, "two"), (alice, "three")):
        await client.post(f"{GROUPS}/{group.id}/join", headers=auth_headers(user))
        sent = await client.post(
            f"{GROUPS}/{group.id}/chat", json={"message": text}, headers=auth_headers(user)
        )
        assert sent.status_code == 201
        assert sent.json()["data"]["user"]["username"] == user.username

    chat = (await client.get(f"{GROUPS}/{group.id}/chat")).json()["data"]
    assert [c["message"] for c in chat] == ["one", "two", "three"]


@pytest.mark.asyncio
async def test_add_member_permissions(
    client: AsyncClient, make_user, make_group, auth_headers
) -> None:
    member = await make_user("alice")
    outsider = await make_user("mallory")
    newbie = await make_user("bob")
    admin = await make_user("root", is_admin=True)
    group = await make_group("Tech")
    await client.post(f"{GROUPS}/{group.id}/join", headers=auth_headers(member))

    # 非成员不能拉人
    denied = await client.post(
        f"{GROUPS}/{group.id}/members",
        json={"user_id": newbie.id},
        headers=auth_headers(outsider),
    )
    assert denied.status_code == 403

    # 成员只能以默认角色拉人
    role_denied = await client.post(
        f"{GROUPS}/{group.id}/members",
        json={"user_id": newbie.id, "role": "owner"},
        headers=auth_headers(member),
    )
    assert role_denied.status_code == 403
    assert role_denied.json()["code"] == "groups.member_forbidden"

    added = await client.post(
        f"{GROUPS}/{group.id}/members",
        json={"user_id": newbie.id},
        headers=auth_headers(member),
    )
    assert added.status_code == 200
    assert added.json()["data"]["changed"] is True

    promoted = await client.post(
        f"{GROUPS}/{group.id}/members",
        json={"user_id": outsider.id, "role": "moderator"},
        headers=auth_headers(admin),
    )
    assert promoted.status_code == 200

    ghost = await client.post(
        f"{GROUPS}/{group.id}/members",
        json={"user_id": 999},
        headers=auth_headers(admin),
    )
    assert ghost.status_code == 404

    members = (await client.get(f"{GROUPS}/{group.id}/members")).json()["data"]
    assert {m["user_id"]: m["role"] for m in members} == {
        member.id: "member",
        newbie.id: "member",
        outsider.id: "moderator",
    }


@pytest.mark.asyncio
async def test_remove_member_permissions(
    client: AsyncClient, make_user, make_group, auth_headers
) -> None:
    alice = await make_user("alice")
    bob = await make_user("bob")
    admin = await make_user("root", is_admin=True)
    group = await make_group("Tech")
    for user in (alice, bob):
        await client.post(f"{GROUPS}/{group.id}/join", headers=auth_headers(user))

    denied = await client.delete(
        f"{GROUPS}/{group.id}/members/{bob.id}", headers=auth_headers(alice)
    )
    assert denied.status_code == 403

    by_self = await client.delete(
        f"{GROUPS}/{group.id}/members/{alice.id}", headers=auth_headers(alice)
    )
    assert by_self.json()["data"]["changed"] is True

    by_admin = await client.delete(
        f"{GROUPS}/{group.id}/members/{bob.id}", headers=auth_headers(admin)
    )
    assert by_admin.json()["data"]["changed"] is True

    members = (await client.get(f"{GROUPS}/{group.id}/members")).json()["data"]
    assert members == []
