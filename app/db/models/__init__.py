"""
File: app/db/models/__init__.py
Description: ORM 模型注册表

导入全部模型，使 Base.metadata 包含所有表，
供 Alembic (env.py) 与测试中的 create_all 使用。
新增模型文件后必须在此导入。

Author: jinmozhe
Created: 2026-03-05
"""

from app.db.models.base import (
    Base,
    CreatedAtMixin,
    IntIDBase,
    IntIDModel,
    TimestampMixin,
)
from app.db.models.group import Group, GroupChatMessage, GroupMember
from app.db.models.post import Comment, Like, Post, PostType, Reaction
from app.db.models.social import (
    Follower,
    FriendRequest,
    FriendRequestStatus,
    Friendship,
)
from app.db.models.user import User

__all__ = [
    # 基类
    "Base",
    "IntIDBase",
    "IntIDModel",
    "TimestampMixin",
    "CreatedAtMixin",
    # 用户
    "User",
    # 小组
    "Group",
    "GroupMember",
    "GroupChatMessage",
    # 帖子
    "Post",
    "PostType",
    "Comment",
    "Like",
    "Reaction",
    # 社交
    "Friendship",
    "FriendRequest",
    "FriendRequestStatus",
    "Follower",
]
