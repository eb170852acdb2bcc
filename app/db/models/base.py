"""
File: app/db/models/base.py
Description: ORM 模型基类与组件化 Mixin

1. Base: 声明式基类，带约束命名约定
2. CreatedAtMixin: [组件] 仅 created_at (追加型数据：评论、聊天、点赞、关系边)
3. TimestampMixin: [组件] created_at + updated_at (可编辑实体：用户、小组)
4. IntIDBase: [基础] 自增整数主键 + 自动 snake_case 表名 + update 工具方法
5. IntIDModel: [标准] IntIDBase + TimestampMixin

关系表 (点赞 / 成员 / 好友 / 关注) 使用复合主键，直接继承 Base + CreatedAtMixin。

Author: jinmozhe
Created: 2026-03-02
"""

import re
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import DateTime, Integer, MetaData, func
from sqlalchemy.orm import DeclarativeBase, Mapped, declared_attr, mapped_column

# 约束命名约定 (Alembic autogenerate 依赖稳定的约束名)
NAMING_CONVENTION = {
    "ix": "ix_%(table_name)s_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_N_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


def resolve_table_name(name: str) -> str:
    """
    CamelCase -> snake_case。
    GroupChatMessage -> group_chat_message
    """
    s1 = re.sub("(.)([A-Z][a-z]+)", r"\1_\2", name)
    return re.sub("([a-z0-9])([A-Z])", r"\1_\2", s1).lower()


def utc_now() -> datetime:
    return datetime.now(UTC)


class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)


# ==============================================================================
# 1. Mixins
# ==============================================================================


class CreatedAtMixin:
    """[组件] 创建时间 (UTC)"""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        server_default=func.now(),
        nullable=False,
        comment="创建时间 (UTC)",
    )


class TimestampMixin(CreatedAtMixin):
    """[组件] 创建 / 更新时间 (UTC)"""

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        server_default=func.now(),
        onupdate=utc_now,
        nullable=False,
        comment="更新时间 (UTC)",
    )


# ==============================================================================
# 2. Base Models
# ==============================================================================


class IntIDBase(Base):
    """
    [基础] 自增整数主键。
    对外暴露的 id 均为十进制整数，路由层直接按 int 解析路径参数。
    """

    __abstract__ = True

    @declared_attr.directive
    def __tablename__(cls) -> str:
        return resolve_table_name(cls.__name__)

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True, comment="主键 (自增)"
    )

    def update(self, **kwargs: Any) -> None:
        """
        按字段名批量赋值，忽略模型上不存在的键。

        用法: user.update(**schema.model_dump(exclude_unset=True))
        """
        for key, value in kwargs.items():
            if hasattr(self, key):
                setattr(self, key, value)


class IntIDModel(IntIDBase, TimestampMixin):
    """[标准] 自增主键 + 创建/更新时间"""

    __abstract__ = True
