"""
File: app/domains/social/repository.py
Description: 社交关系仓储层 (Repository)

1. 好友: friendships 表，成对存储 (A,B) 与 (B,A)
2. 好友申请: friend_requests 表，状态只允许从 pending 迁移一次
3. 关注: followers 表，单向

所有关系写入都基于唯一键 + ON CONFLICT DO NOTHING，重复调用为空操作。
本层只 flush 不 commit。

Author: jinmozhe
Created: 2026-03-08
"""

from sqlalchemy import delete, select, update

from app.db.models.base import utc_now
from app.db.models.social import (
    Follower,
    FriendRequest,
    FriendRequestStatus,
    Friendship,
)
from app.db.models.user import User
from app.db.repositories.base import BaseRepository
from app.domains.social.schemas import FriendRequestRead


class SocialRepository(BaseRepository[FriendRequest, FriendRequestRead, FriendRequestRead]):
    # --------------------------------------------------------------------------
    # Friendship
    # --------------------------------------------------------------------------

    async def get_friends(self, user_id: int) -> list[User]:
        stmt = (
            select(User)
            .join(Friendship, Friendship.friend_id == User.id)
            .where(Friendship.user_id == user_id)
            .order_by(Friendship.created_at.asc(), User.id.asc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def add_friendship_pair(self, user_a: int, user_b: int) -> None:
        """写入双向好友边，已存在的一侧跳过"""
        for user_id, friend_id in ((user_a, user_b), (user_b, user_a)):
            await self.insert_ignore(
                Friendship,
                {"user_id": user_id, "friend_id": friend_id},
                conflict_columns=("user_id", "friend_id"),
            )

    # --------------------------------------------------------------------------
    # Friend Request
    # --------------------------------------------------------------------------

    async def get_request(self, sender_id: int, receiver_id: int) -> FriendRequest | None:
        stmt = select(FriendRequest).where(
            FriendRequest.sender_id == sender_id,
            FriendRequest.receiver_id == receiver_id,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def insert_request(self, sender_id: int, receiver_id: int) -> bool:
        return await self.insert_ignore(
            FriendRequest,
            {
                "sender_id": sender_id,
                "receiver_id": receiver_id,
                "status": FriendRequestStatus.PENDING.value,
            },
            conflict_columns=("sender_id", "receiver_id"),
        )

    async def resolve_pending_request(
        self, sender_id: int, receiver_id: int, status: FriendRequestStatus
    ) -> bool:
        """
        pending -> status。
        条件更新只匹配 pending 行，终态不会被再次改写。
        """
        stmt = (
            update(FriendRequest)
            .where(
                FriendRequest.sender_id == sender_id,
                FriendRequest.receiver_id == receiver_id,
                FriendRequest.status == FriendRequestStatus.PENDING.value,
            )
            .values(status=status.value, updated_at=utc_now())
            .returning(FriendRequest.id)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.first() is not None

    async def get_requests_with_senders(
        self, receiver_id: int, status: FriendRequestStatus | None = None
    ) -> list[tuple[FriendRequest, User | None]]:
        stmt = (
            select(FriendRequest, User)
            .outerjoin(User, User.id == FriendRequest.sender_id)
            .where(FriendRequest.receiver_id == receiver_id)
        )
        if status is not None:
            stmt = stmt.where(FriendRequest.status == status.value)
        stmt = stmt.order_by(FriendRequest.created_at.desc(), FriendRequest.id.desc())

        result = await self.session.execute(stmt)
        return [(request, user) for request, user in result.all()]

    # --------------------------------------------------------------------------
    # Follower
    # --------------------------------------------------------------------------

    async def get_followers(self, user_id: int) -> list[User]:
        stmt = (
            select(User)
            .join(Follower, Follower.follower_id == User.id)
            .where(Follower.following_id == user_id)
            .order_by(Follower.created_at.asc(), User.id.asc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_following(self, user_id: int) -> list[User]:
        stmt = (
            select(User)
            .join(Follower, Follower.following_id == User.id)
            .where(Follower.follower_id == user_id)
            .order_by(Follower.created_at.asc(), User.id.asc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def insert_follow(self, follower_id: int, following_id: int) -> bool:
        return await self.insert_ignore(
            Follower,
            {"follower_id": follower_id, "following_id": following_id},
            conflict_columns=("follower_id", "following_id"),
        )

    async def delete_follow(self, follower_id: int, following_id: int) -> bool:
        stmt = (
            delete(Follower)
            .where(
                Follower.follower_id == follower_id,
                Follower.following_id == following_id,
            )
            .returning(Follower.follower_id)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.first() is not None

    async def is_following(self, follower_id: int, following_id: int) -> bool:
        stmt = select(Follower.follower_id).where(
            Follower.follower_id == follower_id,
            Follower.following_id == following_id,
        )
        result = await self.session.execute(stmt)
        return result.first() is not None
