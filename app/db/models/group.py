"""
File: app/db/models/group.py
Description: 小组领域模型

1. Group: 小组 (由种子数据或管理员创建，读多写少)
2. GroupMember: 成员关系 (group_id, user_id) 复合主键，是"用户所在小组"的唯一数据源
3. GroupChatMessage: 小组聊天记录 (只追加)

Author: jinmozhe
Created: 2026-03-05
"""

from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
    text,
)
from sqlalchemy.orm import Mapped, declared_attr, mapped_column

from app.db.models.base import Base, CreatedAtMixin, IntIDBase, IntIDModel, utc_now

DEFAULT_MEMBER_ROLE = "member"


class Group(IntIDModel):
    """小组"""

    @declared_attr.directive
    def __tablename__(cls) -> str:
        return "groups"

    name: Mapped[str] = mapped_column(String(100), nullable=False, comment="名称")
    description: Mapped[str] = mapped_column(Text, nullable=False, comment="简介")
    category: Mapped[str] = mapped_column(
        String(50), nullable=False, index=True, comment="分类"
    )
    icon_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    cover_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    is_private: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        server_default=text("false"),
        nullable=False,
        comment="是否私密",
    )


class GroupMember(Base):
    """
    小组成员 (N:N 关联)

    复合主键保证同一用户在同一小组只有一行，
    join / add 使用 ON CONFLICT DO NOTHING 实现幂等。
    """

    __tablename__ = "group_members"

    __table_args__ = (Index("ix_group_members_user_id", "user_id"),)

    group_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("groups.id"), primary_key=True, comment="小组ID"
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), primary_key=True, comment="用户ID"
    )
    role: Mapped[str] = mapped_column(
        String(20),
        default=DEFAULT_MEMBER_ROLE,
        server_default=text(f"'{DEFAULT_MEMBER_ROLE}'"),
        nullable=False,
        comment="角色 (member / moderator / owner)",
    )
    joined_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        server_default=func.now(),
        nullable=False,
        comment="加入时间 (UTC)",
    )


class GroupChatMessage(IntIDBase, CreatedAtMixin):
    """小组聊天消息 (只追加)"""

    @declared_attr.directive
    def __tablename__(cls) -> str:
        return "group_chat"

    __table_args__ = (
        Index("ix_group_chat_group_id_created_at", "group_id", "created_at"),
    )

    group_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("groups.id"), nullable=False, comment="小组ID"
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False, comment="发送者ID"
    )
    message: Mapped[str] = mapped_column(Text, nullable=False, comment="消息内容")
