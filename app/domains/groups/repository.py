"""
File: app/domains/groups/repository.py
Description: 小组领域仓储层 (Repository)

1. 小组: 列表 / 创建 (继承 BaseRepository)
2. 成员: group_members 单表，加入 / 添加用 ON CONFLICT DO NOTHING 幂等写入
3. 聊天: 只追加

本层只 flush 不 commit。

Author: jinmozhe
Created: 2026-03-07
"""

from sqlalchemy import delete, select

from app.db.models.group import (
    DEFAULT_MEMBER_ROLE,
    Group,
    GroupChatMessage,
    GroupMember,
)
from app.db.models.user import User
from app.db.repositories.base import BaseRepository
from app.domains.groups.schemas import GroupCreate


class GroupRepository(BaseRepository[Group, GroupCreate, GroupCreate]):
    # --------------------------------------------------------------------------
    # Group
    # --------------------------------------------------------------------------

    async def get_groups(self) -> list[Group]:
        stmt = select(Group).order_by(Group.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_user_groups(self, user_id: int) -> list[Group]:
        stmt = (
            select(Group)
            .join(GroupMember, GroupMember.group_id == Group.id)
            .where(GroupMember.user_id == user_id)
            .order_by(GroupMember.joined_at.asc(), Group.id.asc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    # --------------------------------------------------------------------------
    # Membership
    # --------------------------------------------------------------------------

    async def add_member(
        self, group_id: int, user_id: int, role: str = DEFAULT_MEMBER_ROLE
    ) -> bool:
        """已是成员时不做任何修改 (角色也不变)，返回 False"""
        return await self.insert_ignore(
            GroupMember,
            {"group_id": group_id, "user_id": user_id, "role": role},
            conflict_columns=("group_id", "user_id"),
        )

    async def remove_member(self, group_id: int, user_id: int) -> bool:
        stmt = (
            delete(GroupMember)
            .where(GroupMember.group_id == group_id, GroupMember.user_id == user_id)
            .returning(GroupMember.user_id)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.first() is not None

    async def is_member(self, group_id: int, user_id: int) -> bool:
        stmt = select(GroupMember.user_id).where(
            GroupMember.group_id == group_id, GroupMember.user_id == user_id
        )
        result = await self.session.execute(stmt)
        return result.first() is not None

    async def get_members_with_users(
        self, group_id: int
    ) -> list[tuple[GroupMember, User | None]]:
        stmt = (
            select(GroupMember, User)
            .outerjoin(User, User.id == GroupMember.user_id)
            .where(GroupMember.group_id == group_id)
            .order_by(GroupMember.joined_at.asc(), GroupMember.user_id.asc())
        )
        result = await self.session.execute(stmt)
        return [(member, user) for member, user in result.all()]

    # --------------------------------------------------------------------------
    # Chat
    # --------------------------------------------------------------------------

    async def get_chat_with_users(
        self, group_id: int
    ) -> list[tuple[GroupChatMessage, User | None]]:
        stmt = (
            select(GroupChatMessage, User)
            .outerjoin(User, User.id == GroupChatMessage.user_id)
            .where(GroupChatMessage.group_id == group_id)
            .order_by(GroupChatMessage.created_at.asc(), GroupChatMessage.id.asc())
        )
        result = await self.session.execute(stmt)
        return [(message, user) for message, user in result.all()]

    async def create_chat_message(
        self, group_id: int, user_id: int, message: str
    ) -> GroupChatMessage:
        chat = GroupChatMessage(group_id=group_id, user_id=user_id, message=message)
        self.session.add(chat)
        await self.session.flush()
        await self.session.refresh(chat)
        return chat
