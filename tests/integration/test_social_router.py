"""
File: tests/integration/test_social_router.py
Description: 社交关系接口集成测试

1. 好友申请：发送 / 接受 / 拒绝 / 重复发送 / 对自己操作
2. 收到的申请列表 (带状态过滤)
3. 关注 / 取消关注 / 粉丝与关注列表

Author: jinmozhe
Created: 2026-03-10
"""

import pytest
from httpx import AsyncClient

USERS = "/api/users"


@pytest.mark.asyncio
async def test_friend_request_accept_flow(
    client: AsyncClient, make_user, auth_headers
) -> None:
    alice = await make_user("alice")
    bob = await make_user("bob")

    sent = await client.post(
        f"{USERS}/{bob.id}/friend-request", headers=auth_headers(alice)
    )
    assert sent.status_code == 200
    assert sent.json()["data"]["changed"] is True

    inbox = (
        await client.get(f"{USERS}/me/friend-requests", headers=auth_headers(bob))
    ).json()["data"]
    assert [(r["sender_id"], r["status"]) for r in inbox] == [(alice.id, "pending")]
    assert inbox[0]["sender"]["username"] == "alice"

    accepted = await client.post(
        f"{USERS}/{alice.id}/accept-friend", headers=auth_headers(bob)
    )
    assert accepted.status_code == 200

    alice_friends = (await client.get(f"{USERS}/{alice.id}/friends")).json()["data"]
    bob_friends = (await client.get(f"{USERS}/{bob.id}/friends")).json()["data"]
    assert [u["id"] for u in alice_friends] == [bob.id]
    assert [u["id"] for u in bob_friends] == [alice.id]

    # 已接受的申请不能再次处理
    again = await client.post(
        f"{USERS}/{alice.id}/accept-friend", headers=auth_headers(bob)
    )
    assert again.status_code == 404
    assert again.json()["code"] == "social.request_not_pending"


@pytest.mark.asyncio
async def test_friend_request_reject_flow(
    client: AsyncClient, make_user, auth_headers
) -> None:
    alice = await make_user("alice")
    bob = await make_user("bob")
    await client.post(f"{USERS}/{bob.id}/friend-request", headers=auth_headers(alice))

    rejected = await client.post(
        f"{USERS}/{alice.id}/reject-friend", headers=auth_headers(bob)
    )
    assert rejected.status_code == 200

    assert (await client.get(f"{USERS}/{alice.id}/friends")).json()["data"] == []
    assert (await client.get(f"{USERS}/{bob.id}/friends")).json()["data"] == []

    resent = await client.post(
        f"{USERS}/{bob.id}/friend-request", headers=auth_headers(alice)
    )
    assert resent.json()["data"]["changed"] is False

    pending = await client.get(
        f"{USERS}/me/friend-requests",
        params={"status": "pending"},
        headers=auth_headers(bob),
    )
    assert pending.json()["data"] == []

    history = await client.get(
        f"{USERS}/me/friend-requests",
        params={"status": "rejected"},
        headers=auth_headers(bob),
    )
    assert [r["sender_id"] for r in history.json()["data"]] == [alice.id]


@pytest.mark.asyncio
async def test_accept_without_request(client: AsyncClient, make_user, auth_headers) -> None:
    alice = await make_user("alice")
    bob = await make_user("bob")

    response = await client.post(
        f"{USERS}/{alice.id}/accept-friend", headers=auth_headers(bob)
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_friend_request_targets(client: AsyncClient, make_user, auth_headers) -> None:
    alice = await make_user("alice")

    to_self = await client.post(
        f"{USERS}/{alice.id}/friend-request", headers=auth_headers(alice)
    )
    assert to_self.status_code == 400
    assert to_self.json()["code"] == "social.self_action"

    to_ghost = await client.post(
        f"{USERS}/999/friend-request", headers=auth_headers(alice)
    )
    assert to_ghost.status_code == 404
    assert to_ghost.json()["code"] == "users.not_found"


@pytest.mark.asyncio
async def test_invalid_status_filter(client: AsyncClient, make_user, auth_headers) -> None:
    alice = await make_user("alice")

    response = await client.get(
        f"{USERS}/me/friend-requests",
        params={"status": "maybe"},
        headers=auth_headers(alice),
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_follow_flow(client: AsyncClient, make_user, auth_headers) -> None:
    alice = await make_user("alice")
    bob = await make_user("bob")
    headers = auth_headers(alice)

    first = await client.post(f"{USERS}/{bob.id}/follow", headers=headers)
    second = await client.post(f"{USERS}/{bob.id}/follow", headers=headers)
    assert first.json()["data"]["changed"] is True
    assert second.json()["data"]["changed"] is False

    followers = (await client.get(f"{USERS}/{bob.id}/followers")).json()["data"]
    following = (await client.get(f"{USERS}/{alice.id}/following")).json()["data"]
    assert [u["username"] for u in followers] == ["alice"]
    assert [u["username"] for u in following] == ["bob"]

    is_following = await client.get(
        f"{USERS}/{bob.id}/is-following", headers=headers
    )
    assert is_following.json()["data"] is True

    unfollowed = await client.post(f"{USERS}/{bob.id}/unfollow", headers=headers)
    assert unfollowed.json()["data"]["changed"] is True
    assert (await client.get(f"{USERS}/{bob.id}/followers")).json()["data"] == []


@pytest.mark.asyncio
async def test_follow_edge_cases(client: AsyncClient, make_user, auth_headers) -> None:
    alice = await make_user("alice")
    headers = auth_headers(alice)

    assert (await client.post(f"{USERS}/{alice.id}/follow", headers=headers)).status_code == 400
    assert (await client.post(f"{USERS}/{alice.id}/unfollow", headers=headers)).status_code == 400
    assert (await client.post(f"{USERS}/999/follow", headers=headers)).status_code == 404
    assert (await client.get(f"{USERS}/999/followers")).status_code == 404
    assert (await client.post(f"{USERS}/{alice.id}/follow")).status_code == 401
