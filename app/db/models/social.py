"""
File: app/db/models/social.py
Description: 社交关系模型

1. Friendship: 好友关系，对称；(A,B) 与 (B,A) 总是在同一事务内成对写入
2. FriendRequest: 好友申请，status: pending -> accepted | rejected (终态，不可回退)
3. Follower: 关注关系，单向，无需对方同意

采用 "No-Relationship" 模式：不声明 ORM relationship，只用外键约束关联 users。

Author: jinmozhe
Created: 2026-03-06
"""

from enum import StrEnum

from sqlalchemy import (
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import Mapped, declared_attr, mapped_column

from app.db.models.base import Base, CreatedAtMixin, IntIDModel


class FriendRequestStatus(StrEnum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class Friendship(Base, CreatedAtMixin):
    """好友边 (有向存储，成对出现)"""

    __tablename__ = "friendships"

    __table_args__ = (
        CheckConstraint("user_id <> friend_id", name="no_self_friendship"),
    )

    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), primary_key=True
    )
    friend_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), primary_key=True
    )


class FriendRequest(IntIDModel):
    """好友申请 (同一方向同一对用户只保留一行)"""

    @declared_attr.directive
    def __tablename__(cls) -> str:
        return "friend_requests"

    __table_args__ = (
        UniqueConstraint("sender_id", "receiver_id"),
        CheckConstraint("sender_id <> receiver_id", name="no_self_request"),
        CheckConstraint(
            "status IN ('pending', 'accepted', 'rejected')", name="status_valid"
        ),
        Index("ix_friend_requests_receiver_id", "receiver_id"),
    )

    sender_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False, comment="发起人"
    )
    receiver_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False, comment="接收人"
    )
    status: Mapped[str] = mapped_column(
        String(10),
        default=FriendRequestStatus.PENDING.value,
        server_default=text("'pending'"),
        nullable=False,
        comment="pending / accepted / rejected",
    )


class Follower(Base, CreatedAtMixin):
    """关注边 follower -> following"""

    __tablename__ = "followers"

    __table_args__ = (
        CheckConstraint("follower_id <> following_id", name="no_self_follow"),
        Index("ix_followers_following_id", "following_id"),
    )

    follower_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), primary_key=True
    )
    following_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), primary_key=True
    )
