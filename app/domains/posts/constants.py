"""
File: app/domains/posts/constants.py
Description: 帖子领域常量定义 (错误码 + 成功提示)
Namespace: posts.*

Author: jinmozhe
Created: 2026-03-07
"""

import re

from starlette.status import HTTP_404_NOT_FOUND

from app.core.error_code import BaseErrorCode

# 视频帖只接受 YouTube 链接 (前端以 iframe 嵌入)
YOUTUBE_URL_PATTERN = re.compile(
    r"^https?://(www\.|m\.)?"
    r"(youtube\.com/(watch\?v=|embed/|shorts/)|youtu\.be/)"
    r"[\w-]+"
)

HTTP_URL_PATTERN = re.compile(r"^https?://\S+$")


class PostError(BaseErrorCode):
    """
    帖子领域错误定义
    Tuple Structure: (HTTP_Status, Code_String, Default_Message)
    """

    POST_NOT_FOUND = (HTTP_404_NOT_FOUND, "posts.not_found", "帖子不存在")

    # 帖子不存在与非作者本人操作返回同一错误，不暴露帖子是否存在
    NOT_FOUND_OR_FORBIDDEN = (
        HTTP_404_NOT_FOUND,
        "posts.not_found_or_forbidden",
        "帖子不存在或无权操作",
    )


class PostMsg:
    CREATE_SUCCESS = "发布成功"
    UPDATE_SUCCESS = "帖子已更新"
    DELETE_SUCCESS = "帖子已删除"
    COMMENT_SUCCESS = "评论成功"
    LIKED = "已点赞"
    UNLIKED = "已取消点赞"
    REACTION_ADDED = "已添加表情"
    REACTION_REMOVED = "已移除表情"
