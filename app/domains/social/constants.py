"""
File: app/domains/social/constants.py
Description: 社交关系领域常量定义 (错误码 + 成功提示)
Namespace: social.*

Author: jinmozhe
Created: 2026-03-08
"""

from starlette.status import HTTP_400_BAD_REQUEST, HTTP_404_NOT_FOUND

from app.core.error_code import BaseErrorCode


class SocialError(BaseErrorCode):
    """
    社交领域错误定义
    Tuple Structure: (HTTP_Status, Code_String, Default_Message)
    """

    # 关注自己 / 向自己发好友申请
    SELF_ACTION = (HTTP_400_BAD_REQUEST, "social.self_action", "不能对自己执行该操作")

    # 不存在处于 pending 状态的申请 (从未发送，或已接受 / 已拒绝)
    REQUEST_NOT_PENDING = (
        HTTP_404_NOT_FOUND,
        "social.request_not_pending",
        "没有待处理的好友申请",
    )


class SocialMsg:
    REQUEST_SENT = "好友申请已发送"
    REQUEST_ACCEPTED = "已接受好友申请"
    REQUEST_REJECTED = "已拒绝好友申请"
    FOLLOWED = "已关注"
    UNFOLLOWED = "已取消关注"
