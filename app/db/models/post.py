"""
File: app/db/models/post.py
Description: 帖子领域模型

1. Post: 帖子 (text / image / video / music)，like_count 为反范式计数器
2. Comment: 评论 (创建后不可修改)
3. Like: 点赞关联表，(user_id, post_id) 复合主键；行存在即"已点赞"
4. Reaction: 表情回应，(post_id, user_id, emoji) 唯一，同一用户可对同一帖子给出多种表情

不变量：
Post.like_count == count(Like where post_id = Post.id)
计数器只在插入/删除 Like 行的同一事务内、且该行确实被插入/删除时才变更。

Author: jinmozhe
Created: 2026-03-05
"""

from enum import StrEnum

from sqlalchemy import (
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import Mapped, declared_attr, mapped_column

from app.db.models.base import Base, CreatedAtMixin, IntIDBase


class PostType(StrEnum):
    TEXT = "text"
    IMAGE = "image"
    VIDEO = "video"
    MUSIC = "music"


class Post(IntIDBase, CreatedAtMixin):
    """帖子"""

    @declared_attr.directive
    def __tablename__(cls) -> str:
        return "posts"

    __table_args__ = (
        CheckConstraint("like_count >= 0", name="like_count_non_negative"),
        CheckConstraint(
            "post_type IN ('text', 'image', 'video', 'music')", name="post_type_valid"
        ),
        Index("ix_posts_group_id_created_at", "group_id", "created_at"),
        Index("ix_posts_user_id_created_at", "user_id", "created_at"),
    )

    content: Mapped[str] = mapped_column(Text, nullable=False, comment="正文")

    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False, comment="作者ID"
    )
    group_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("groups.id"), nullable=False, comment="所属小组ID"
    )

    post_type: Mapped[str] = mapped_column(
        String(10),
        default=PostType.TEXT.value,
        server_default=text("'text'"),
        nullable=False,
        comment="帖子类型",
    )

    # 与 post_type 对应，至多一个有值
    image_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    video_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    music_url: Mapped[str | None] = mapped_column(String(500), nullable=True)

    like_count: Mapped[int] = mapped_column(
        Integer,
        default=0,
        server_default=text("0"),
        nullable=False,
        comment="点赞数 (反范式计数器)",
    )


class Comment(IntIDBase, CreatedAtMixin):
    """评论"""

    @declared_attr.directive
    def __tablename__(cls) -> str:
        return "comments"

    __table_args__ = (Index("ix_comments_post_id_created_at", "post_id", "created_at"),)

    content: Mapped[str] = mapped_column(Text, nullable=False)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False, comment="作者ID"
    )
    post_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("posts.id"), nullable=False, comment="帖子ID"
    )


class Like(Base, CreatedAtMixin):
    """点赞 (user, post) 唯一"""

    __tablename__ = "likes"

    __table_args__ = (Index("ix_likes_post_id", "post_id"),)

    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), primary_key=True
    )
    post_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("posts.id"), primary_key=True
    )


class Reaction(IntIDBase, CreatedAtMixin):
    """表情回应"""

    @declared_attr.directive
    def __tablename__(cls) -> str:
        return "reactions"

    __table_args__ = (UniqueConstraint("post_id", "user_id", "emoji"),)

    post_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("posts.id"), nullable=False, index=True
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False
    )
    emoji: Mapped[str] = mapped_column(String(32), nullable=False)
