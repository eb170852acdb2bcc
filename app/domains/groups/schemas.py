"""
File: app/domains/groups/schemas.py
Description: 小组领域 Pydantic 模型 (Schema)

1. GroupCreate / GroupRead
2. GroupMemberCreate / GroupMemberRead (带成员简要信息)
3. MembershipChange: 加入 / 退出 / 添加 / 移除的结果
4. ChatMessageCreate / ChatMessageRead
5. GroupDetail: 小组 + 帖子 + 成员 + 聊天，一次返回

Author: jinmozhe
Created: 2026-03-07
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.db.models.group import DEFAULT_MEMBER_ROLE
from app.domains.posts.schemas import PostRead
from app.domains.users.schemas import UserBrief

# ------------------------------------------------------------------------------
# Group
# ------------------------------------------------------------------------------


class GroupCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100, examples=["Tech"])
    description: str = Field(..., min_length=1, max_length=2000)
    category: str = Field(..., min_length=1, max_length=50, examples=["Career"])
    icon_url: str | None = Field(default=None, max_length=500)
    cover_url: str | None = Field(default=None, max_length=500)
    is_private: bool = False


class GroupRead(BaseModel):
    id: int
    name: str
    description: str
    category: str
    icon_url: str | None = None
    cover_url: str | None = None
    is_private: bool = False
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ------------------------------------------------------------------------------
# Membership
# ------------------------------------------------------------------------------

MEMBER_ROLES = frozenset({"member", "moderator", "owner"})


class GroupMemberCreate(BaseModel):
    """管理员 / 成员手动添加成员"""

    user_id: int = Field(..., gt=0)
    role: str = Field(default=DEFAULT_MEMBER_ROLE, description="member / moderator / owner")

    @field_validator("role")
    @classmethod
    def validate_role(cls, v: str) -> str:
        if v not in MEMBER_ROLES:
            raise ValueError(f"role must be one of {sorted(MEMBER_ROLES)}")
        return v


class GroupMemberRead(BaseModel):
    group_id: int
    user_id: int
    role: str
    joined_at: datetime
    user: UserBrief | None = None

    model_config = ConfigDict(from_attributes=True)


class MembershipChange(BaseModel):
    group_id: int
    user_id: int
    is_member: bool = Field(..., description="操作后是否为成员")
    changed: bool = Field(..., description="本次操作是否改变了成员关系")


# ------------------------------------------------------------------------------
# Chat
# ------------------------------------------------------------------------------


class ChatMessageCreate(BaseModel):
    message: str = Field(..., min_length=1, max_length=2000)

    @field_validator("message")
    @classmethod
    def message_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("message must not be blank")
        return v


class ChatMessageRead(BaseModel):
    id: int
    group_id: int
    user_id: int
    message: str
    created_at: datetime
    user: UserBrief | None = None

    model_config = ConfigDict(from_attributes=True)


# ------------------------------------------------------------------------------
# Detail
# ------------------------------------------------------------------------------


class GroupDetail(GroupRead):
    posts: list[PostRead] = Field(default_factory=list, description="帖子 (最新在前)")
    members: list[GroupMemberRead] = Field(
        default_factory=list, description="成员 (按加入时间)"
    )
    chat_messages: list[ChatMessageRead] = Field(
        default_factory=list, description="聊天 (最早在前)"
    )
