"""
File: app/domains/users/schemas.py
Description: 用户领域 Pydantic 模型 (Schema)

本模块定义了用户相关的输入/输出数据结构：
1. UserProfileFields: 可编辑的个人资料 + 主页定制字段
2. UserCreate: 注册参数 (包含密码明文)
3. UserUpdate: 资料更新参数 (所有字段可选，PATCH 语义)
4. UserBrief: 嵌入在评论、成员、好友申请中的作者简要信息
5. UserRead: 完整资料响应 (屏蔽密码)
6. UserStats: 主页统计数字

规范：
- 严格遵循 Pydantic V2 写法 (ConfigDict)
- 响应模型开启 from_attributes=True 以支持 ORM 转换
- 任何响应模型都不包含 password 字段

Author: jinmozhe
Created: 2026-03-06
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ------------------------------------------------------------------------------
# Constants (常量定义)
# ------------------------------------------------------------------------------

USERNAME_PATTERN = r"^[A-Za-z0-9_.-]+$"


# ------------------------------------------------------------------------------
# Shared Properties (共享属性)
# ------------------------------------------------------------------------------


class UserProfileFields(BaseModel):
    """
    个人资料字段 (注册时可选填写，之后可通过 PATCH 修改)。
    """

    bio: str | None = Field(default=None, max_length=2000, description="个人简介")
    avatar_url: str | None = Field(default=None, max_length=500, description="头像 URL")
    cover_url: str | None = Field(default=None, max_length=500, description="封面 URL")
    location: str | None = Field(default=None, max_length=100)
    interests: str | None = Field(default=None, max_length=2000)
    occupation: str | None = Field(default=None, max_length=100)
    relationship_status: str | None = Field(default=None, max_length=50)
    favorite_quote: str | None = Field(default=None, max_length=2000)
    social_links: dict[str, str] | None = Field(
        default=None, description="社交链接 {platform: url}"
    )

    theme: str | None = Field(default=None, max_length=20, description="主题")
    profile_layout: str | None = Field(default=None, max_length=20, description="主页布局")
    custom_css: str | None = Field(default=None)
    background_color: str | None = Field(default=None, max_length=20)
    text_color: str | None = Field(default=None, max_length=20)
    accent_color: str | None = Field(default=None, max_length=20)
    font_family: str | None = Field(default=None, max_length=100)


# ------------------------------------------------------------------------------
# Input Schemas (输入模型)
# ------------------------------------------------------------------------------


class UserCreate(UserProfileFields):
    """
    用户注册模型。
    用户名、密码、昵称为必填项。
    """

    username: str = Field(
        ...,
        min_length=3,
        max_length=50,
        pattern=USERNAME_PATTERN,
        description="用户名 (唯一, 登录凭证)",
        examples=["alice"],
    )
    password: str = Field(..., min_length=6, max_length=128, description="明文密码")
    display_name: str = Field(..., min_length=1, max_length=100, description="展示昵称")


class UserUpdate(UserProfileFields):
    """
    资料更新模型。
    仅更新传入的字段；username / password / is_admin 不在此列，传入即校验失败。
    """

    model_config = ConfigDict(extra="forbid")

    display_name: str | None = Field(default=None, min_length=1, max_length=100)

    @field_validator("display_name", "theme", "profile_layout")
    @classmethod
    def not_null(cls, v: str | None) -> str | None:
        # 这三列在库中非空，只能改值不能清空
        if v is None:
            raise ValueError("field cannot be null")
        return v


# ------------------------------------------------------------------------------
# Output Schemas (输出/响应模型)
# ------------------------------------------------------------------------------


class UserBrief(BaseModel):
    """作者 / 成员 / 申请人的简要信息"""

    id: int
    username: str
    display_name: str
    avatar_url: str | None = None

    model_config = ConfigDict(from_attributes=True)


class UserRead(UserProfileFields):
    """
    用户读取模型 (响应)。
    屏蔽了 password 字段。
    """

    id: int = Field(..., description="用户 ID")
    username: str
    display_name: str
    theme: str = "light"
    profile_layout: str = "classic"
    is_admin: bool = False
    created_at: datetime = Field(..., description="创建时间 (UTC)")
    updated_at: datetime = Field(..., description="更新时间 (UTC)")

    model_config = ConfigDict(from_attributes=True)


class UserStats(BaseModel):
    """主页统计 (实时计算，不缓存)"""

    post_count: int = 0
    friend_count: int = 0
    follower_count: int = 0
    following_count: int = 0
