"""
File: app/domains/social/service.py
Description: 社交关系领域服务 (业务逻辑层)

1. 好友申请: 发送 (幂等) / 接受 / 拒绝
2. 接受申请: 状态迁移 + 双向好友边在同一事务内提交，任一步失败整体回滚
3. 关注 / 取消关注 (幂等)

自我操作 (关注自己、向自己发申请) 由路由层拒绝。

Author: jinmozhe
Created: 2026-03-08
"""

from app.core.logging import logger
from app.db.models.social import FriendRequest, FriendRequestStatus
from app.db.models.user import User
from app.domains.social.repository import SocialRepository
from app.domains.social.schemas import FriendRequestRead
from app.domains.users.schemas import UserBrief


class SocialService:
    def __init__(self, repo: SocialRepository):
        self.repo = repo

    # --------------------------------------------------------------------------
    # Friend
    # --------------------------------------------------------------------------

    async def get_friends(self, user_id: int) -> list[User]:
        return await self.repo.get_friends(user_id)

    async def send_friend_request(self, sender_id: int, receiver_id: int) -> bool:
        """
        发送好友申请。同方向已有申请 (任意状态) 时不做修改，返回 False。
        """
        created = await self.repo.insert_request(sender_id, receiver_id)
        await self.repo.session.commit()

        if created:
            logger.bind(sender_id=sender_id, receiver_id=receiver_id).info(
                "Friend request sent"
            )
        return created

    async def accept_friend_request(self, sender_id: int, receiver_id: int) -> bool:
        """
        接受好友申请：pending -> accepted，并写入双向好友关系。
        申请不处于 pending 时不写入任何数据，返回 False。
        """
        try:
            accepted = await self.repo.resolve_pending_request(
                sender_id, receiver_id, FriendRequestStatus.ACCEPTED
            )
            if not accepted:
                await self.repo.session.rollback()
                return False

            await self.repo.add_friendship_pair(sender_id, receiver_id)
            await self.repo.session.commit()
        except Exception:
            await self.repo.session.rollback()
            raise

        logger.bind(sender_id=sender_id, receiver_id=receiver_id).info(
            "Friend request accepted"
        )
        return True

    async def reject_friend_request(self, sender_id: int, receiver_id: int) -> bool:
        """pending -> rejected，申请行保留作为历史记录"""
        rejected = await self.repo.resolve_pending_request(
            sender_id, receiver_id, FriendRequestStatus.REJECTED
        )
        await self.repo.session.commit()

        if rejected:
            logger.bind(sender_id=sender_id, receiver_id=receiver_id).info(
                "Friend request rejected"
            )
        return rejected

    async def get_friend_request(
        self, sender_id: int, receiver_id: int
    ) -> FriendRequest | None:
        return await self.repo.get_request(sender_id, receiver_id)

    async def get_friend_requests(
        self, user_id: int, status: FriendRequestStatus | None = None
    ) -> list[FriendRequestRead]:
        """收到的好友申请 (最新在前)，可按状态过滤"""
        rows = await self.repo.get_requests_with_senders(user_id, status)
        requests = []
        for request, sender in rows:
            read = FriendRequestRead.model_validate(request)
            if sender is not None:
                read.sender = UserBrief.model_validate(sender)
            requests.append(read)
        return requests

    # --------------------------------------------------------------------------
    # Follow
    # --------------------------------------------------------------------------

    async def get_followers(self, user_id: int) -> list[User]:
        return await self.repo.get_followers(user_id)

    async def get_following(self, user_id: int) -> list[User]:
        return await self.repo.get_following(user_id)

    async def follow_user(self, follower_id: int, following_id: int) -> bool:
        created = await self.repo.insert_follow(follower_id, following_id)
        await self.repo.session.commit()
        return created

    async def unfollow_user(self, follower_id: int, following_id: int) -> bool:
        removed = await self.repo.delete_follow(follower_id, following_id)
        await self.repo.session.commit()
        return removed

    async def is_following(self, follower_id: int, following_id: int) -> bool:
        return await self.repo.is_following(follower_id, following_id)
