"""
File: app/domains/groups/constants.py
Description: 小组领域常量定义 (错误码 + 成功提示)
Namespace: groups.*

Author: jinmozhe
Created: 2026-03-07
"""

from starlette.status import HTTP_403_FORBIDDEN, HTTP_404_NOT_FOUND

from app.core.error_code import BaseErrorCode


class GroupError(BaseErrorCode):
    """
    小组领域错误定义
    Tuple Structure: (HTTP_Status, Code_String, Default_Message)
    """

    GROUP_NOT_FOUND = (HTTP_404_NOT_FOUND, "groups.not_found", "小组不存在")

    # 发帖 / 聊天需要先加入小组
    NOT_MEMBER = (HTTP_403_FORBIDDEN, "groups.not_member", "请先加入该小组")

    # 移除他人需要管理员权限
    MEMBER_FORBIDDEN = (
        HTTP_403_FORBIDDEN,
        "groups.member_forbidden",
        "只能移除自己或由管理员操作",
    )


class GroupMsg:
    CREATE_SUCCESS = "小组创建成功"
    JOIN_SUCCESS = "已加入小组"
    LEAVE_SUCCESS = "已退出小组"
    MEMBER_ADDED = "成员已添加"
    MEMBER_REMOVED = "成员已移除"
    MESSAGE_SENT = "消息已发送"
