"""
File: app/db/models/user.py
Description: 用户模型 (账号 + 可定制个人主页)

继承 IntIDModel，自动拥有：
1. 自增整数主键
2. created_at / updated_at (UTC)

约定：
- password 只存哈希值，由 auth 领域在写入前计算，任何响应 Schema 都不包含此字段
- 用户不做物理删除
- social_links 为 JSON 映射 {平台名: URL}

Author: jinmozhe
Created: 2026-03-02
"""

from typing import Any

from sqlalchemy import JSON, Boolean, CheckConstraint, String, Text, text
from sqlalchemy.orm import Mapped, declared_attr, mapped_column

from app.db.models.base import IntIDModel


class User(IntIDModel):
    """用户"""

    @declared_attr.directive
    def __tablename__(cls) -> str:
        return "users"

    __table_args__ = (
        CheckConstraint("length(trim(username)) > 0", name="username_not_empty"),
        CheckConstraint("length(password) > 0", name="password_not_empty"),
    )

    # --------------------------------------------------------------------------
    # 账号
    # --------------------------------------------------------------------------

    username: Mapped[str] = mapped_column(
        String(50), unique=True, nullable=False, comment="用户名 (登录凭证, 唯一)"
    )

    password: Mapped[str] = mapped_column(
        String(255), nullable=False, comment="密码哈希 (Argon2id)"
    )

    display_name: Mapped[str] = mapped_column(
        String(100), nullable=False, comment="展示昵称"
    )

    is_admin: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        server_default=text("false"),
        nullable=False,
        comment="是否管理员",
    )

    # --------------------------------------------------------------------------
    # 基础资料
    # --------------------------------------------------------------------------

    bio: Mapped[str | None] = mapped_column(Text, nullable=True, comment="个人简介")
    avatar_url: Mapped[str | None] = mapped_column(
        String(500), nullable=True, comment="头像 URL"
    )
    cover_url: Mapped[str | None] = mapped_column(
        String(500), nullable=True, comment="封面 URL"
    )
    location: Mapped[str | None] = mapped_column(String(100), nullable=True)
    interests: Mapped[str | None] = mapped_column(Text, nullable=True)
    occupation: Mapped[str | None] = mapped_column(String(100), nullable=True)
    relationship_status: Mapped[str | None] = mapped_column(String(50), nullable=True)
    favorite_quote: Mapped[str | None] = mapped_column(Text, nullable=True)

    social_links: Mapped[dict[str, Any] | None] = mapped_column(
        JSON, nullable=True, comment="社交链接 {platform: url}"
    )

    # --------------------------------------------------------------------------
    # 主页定制
    # --------------------------------------------------------------------------

    theme: Mapped[str] = mapped_column(
        String(20),
        default="light",
        server_default=text("'light'"),
        nullable=False,
        comment="主题",
    )
    profile_layout: Mapped[str] = mapped_column(
        String(20),
        default="classic",
        server_default=text("'classic'"),
        nullable=False,
        comment="主页布局",
    )
    custom_css: Mapped[str | None] = mapped_column(Text, nullable=True)
    background_color: Mapped[str | None] = mapped_column(String(20), nullable=True)
    text_color: Mapped[str | None] = mapped_column(String(20), nullable=True)
    accent_color: Mapped[str | None] = mapped_column(String(20), nullable=True)
    font_family: Mapped[str | None] = mapped_column(String(100), nullable=True)
