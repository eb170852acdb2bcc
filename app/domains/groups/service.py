"""
File: app/domains/groups/service.py
Description: 小组领域服务 (业务逻辑层)

本模块封装小组、成员关系与小组聊天的业务逻辑：
1. 小组列表 / 创建 / 详情
2. 小组详情：帖子、成员、聊天三个查询并发执行后合并
3. 成员关系：加入 / 退出 / 添加 / 移除均幂等，返回是否发生变化
4. 聊天：只追加，按时间正序读取

Author: jinmozhe
Created: 2026-03-07
"""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.exceptions import AppException
from app.core.logging import logger
from app.db.models.group import DEFAULT_MEMBER_ROLE, Group, GroupChatMessage
from app.db.models.post import Post
from app.db.session import gather_in_sessions
from app.domains.groups.constants import GroupError
from app.domains.groups.repository import GroupRepository
from app.domains.groups.schemas import (
    ChatMessageRead,
    GroupCreate,
    GroupDetail,
    GroupMemberRead,
    GroupRead,
)
from app.domains.posts.repository import PostRepository
from app.domains.posts.schemas import PostRead
from app.domains.users.schemas import UserBrief


class GroupService:
    def __init__(
        self,
        repo: GroupRepository,
        session_factory: async_sessionmaker[AsyncSession],
    ):
        self.repo = repo
        self.session_factory = session_factory

    # --------------------------------------------------------------------------
    # Group
    # --------------------------------------------------------------------------

    async def get_groups(self) -> list[Group]:
        return await self.repo.get_groups()

    async def get_group_or_404(self, group_id: int) -> Group:
        group = await self.repo.get(group_id)
        if group is None:
            raise AppException(GroupError.GROUP_NOT_FOUND)
        return group

    async def create_group(self, obj_in: GroupCreate) -> Group:
        group = await self.repo.create(obj_in)
        await self.repo.session.commit()

        logger.bind(group_id=group.id, name=group.name).info("Group created")
        return group

    async def get_group_detail(self, group_id: int) -> GroupDetail | None:
        """
        小组 + 帖子 (最新在前) + 成员 (按加入时间) + 聊天 (最早在前)。
        三个子查询各自使用独立 Session 并发执行。
        """
        group = await self.repo.get(group_id)
        if group is None:
            return None

        async def _posts(session: AsyncSession) -> list[Post]:
            return await PostRepository(model=Post, session=session).get_group_posts(
                group_id
            )

        async def _members(session: AsyncSession) -> list[GroupMemberRead]:
            rows = await GroupRepository(model=Group, session=session).get_members_with_users(
                group_id
            )
            return [self._member_read(member, user) for member, user in rows]

        async def _chat(session: AsyncSession) -> list[ChatMessageRead]:
            rows = await GroupRepository(model=Group, session=session).get_chat_with_users(
                group_id
            )
            return [self._chat_read(message, user) for message, user in rows]

        posts, members, chat_messages = await gather_in_sessions(
            self.session_factory, _posts, _members, _chat
        )

        return GroupDetail(
            **GroupRead.model_validate(group).model_dump(),
            posts=[PostRead.model_validate(post) for post in posts],
            members=members,
            chat_messages=chat_messages,
        )

    # --------------------------------------------------------------------------
    # Membership
    # --------------------------------------------------------------------------

    async def join_group(self, user_id: int, group_id: int) -> bool:
        return await self.add_group_member(user_id, group_id)

    async def leave_group(self, user_id: int, group_id: int) -> bool:
        return await self.remove_group_member(user_id, group_id)

    async def add_group_member(
        self, user_id: int, group_id: int, role: str = DEFAULT_MEMBER_ROLE
    ) -> bool:
        added = await self.repo.add_member(group_id, user_id, role)
        await self.repo.session.commit()

        if added:
            logger.bind(group_id=group_id, user_id=user_id, role=role).info(
                "Group member added"
            )
        return added

    async def remove_group_member(self, user_id: int, group_id: int) -> bool:
        removed = await self.repo.remove_member(group_id, user_id)
        await self.repo.session.commit()

        if removed:
            logger.bind(group_id=group_id, user_id=user_id).info("Group member removed")
        return removed

    async def is_group_member(self, user_id: int, group_id: int) -> bool:
        return await self.repo.is_member(group_id, user_id)

    async def ensure_member(self, user_id: int, group_id: int) -> None:
        if not await self.repo.is_member(group_id, user_id):
            raise AppException(GroupError.NOT_MEMBER)

    async def get_group_members(self, group_id: int) -> list[GroupMemberRead]:
        rows = await self.repo.get_members_with_users(group_id)
        return [self._member_read(member, user) for member, user in rows]

    async def get_user_groups(self, user_id: int) -> list[Group]:
        return await self.repo.get_user_groups(user_id)

    # --------------------------------------------------------------------------
    # Chat
    # --------------------------------------------------------------------------

    async def get_group_chat(self, group_id: int) -> list[ChatMessageRead]:
        rows = await self.repo.get_chat_with_users(group_id)
        return [self._chat_read(message, user) for message, user in rows]

    async def create_chat_message(
        self, user_id: int, group_id: int, message: str
    ) -> GroupChatMessage:
        chat = await self.repo.create_chat_message(group_id, user_id, message)
        await self.repo.session.commit()
        return chat

    # --------------------------------------------------------------------------
    # Helpers
    # --------------------------------------------------------------------------

    @staticmethod
    def _member_read(member, user) -> GroupMemberRead:
        read = GroupMemberRead.model_validate(member)
        if user is not None:
            read.user = UserBrief.model_validate(user)
        return read

    @staticmethod
    def _chat_read(message, user) -> ChatMessageRead:
        read = ChatMessageRead.model_validate(message)
        if user is not None:
            read.user = UserBrief.model_validate(user)
        return read
