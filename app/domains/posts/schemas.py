"""
File: app/domains/posts/schemas.py
Description: 帖子领域 Pydantic 模型 (Schema)

本模块定义了帖子、评论、点赞、表情回应的输入/输出数据结构：
1. PostCreate / PostUpdate / PostRead
2. CommentCreate / CommentRead (带作者简要信息)
3. LikeState: 点赞切换后的状态
4. ReactionCreate / ReactionRead / ReactionSummary / PostReactions

媒体链接规则 (PostCreate):
- image / music: http(s) 链接，或上传接口返回的站内路径
- video: YouTube 链接
- text: 不携带媒体

Author: jinmozhe
Created: 2026-03-07
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from app.core.config import settings
from app.db.models.post import PostType
from app.domains.posts.constants import HTTP_URL_PATTERN, YOUTUBE_URL_PATTERN
from app.domains.users.schemas import UserBrief

# ------------------------------------------------------------------------------
# Post
# ------------------------------------------------------------------------------


def _is_hosted_url(url: str) -> bool:
    return bool(HTTP_URL_PATTERN.match(url)) or url.startswith(
        f"{settings.UPLOAD_URL_PREFIX.rstrip('/')}/"
    )


class PostCreate(BaseModel):
    """
    发帖参数。
    group_id 来自路径参数，user_id 来自当前登录用户，均不在请求体中。
    """

    content: str = Field(..., min_length=1, max_length=10000, description="正文")
    post_type: PostType = Field(default=PostType.TEXT, description="帖子类型")
    media_url: str | None = Field(
        default=None, max_length=500, description="媒体链接 (image / video / music)"
    )

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("content must not be blank")
        return v

    @model_validator(mode="after")
    def check_media(self) -> "PostCreate":
        url = self.media_url

        if self.post_type == PostType.TEXT:
            if url:
                raise ValueError("text posts carry no media_url")
            return self

        if not url:
            raise ValueError(f"media_url is required for {self.post_type.value} posts")

        if self.post_type == PostType.VIDEO:
            if not YOUTUBE_URL_PATTERN.match(url):
                raise ValueError("video posts require a YouTube URL")
        elif not _is_hosted_url(url):
            raise ValueError(f"{self.post_type.value} posts require an http(s) URL")

        return self


class PostUpdate(BaseModel):
    """帖子只允许修改正文"""

    content: str = Field(..., min_length=1, max_length=10000)

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("content must not be blank")
        return v


class PostRead(BaseModel):
    id: int
    content: str
    user_id: int
    group_id: int
    post_type: PostType
    image_url: str | None = None
    video_url: str | None = None
    music_url: str | None = None
    like_count: int = 0
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ------------------------------------------------------------------------------
# Comment
# ------------------------------------------------------------------------------


class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=5000, description="评论内容")

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("content must not be blank")
        return v


class CommentRead(BaseModel):
    id: int
    content: str
    user_id: int
    post_id: int
    created_at: datetime
    author: UserBrief | None = Field(default=None, description="评论作者")

    model_config = ConfigDict(from_attributes=True)


# ------------------------------------------------------------------------------
# Like
# ------------------------------------------------------------------------------


class LikeState(BaseModel):
    post_id: int
    liked: bool = Field(..., description="当前用户是否已点赞")
    like_count: int


# ------------------------------------------------------------------------------
# Reaction
# ------------------------------------------------------------------------------


class ReactionCreate(BaseModel):
    emoji: str = Field(..., min_length=1, max_length=32, examples=["👍"])


class ReactionRead(BaseModel):
    id: int
    post_id: int
    user_id: int
    emoji: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ReactionSummary(BaseModel):
    emoji: str
    count: int


class PostReactions(BaseModel):
    reactions: list[ReactionRead] = Field(default_factory=list)
    summary: list[ReactionSummary] = Field(
        default_factory=list, description="按表情聚合的计数"
    )
