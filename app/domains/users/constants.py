"""
File: app/domains/users/constants.py
Description: 用户领域常量定义 (错误码 + 成功提示)
Namespace: users.*

Author: jinmozhe
Created: 2026-03-06
"""

from starlette.status import HTTP_403_FORBIDDEN, HTTP_404_NOT_FOUND, HTTP_409_CONFLICT

from app.core.error_code import BaseErrorCode


class UserError(BaseErrorCode):
    """用户领域错误码"""

    # 格式: (HTTP状态, 业务码, 默认文案)

    USER_NOT_FOUND = (HTTP_404_NOT_FOUND, "users.not_found", "用户不存在")
    USERNAME_EXIST = (HTTP_409_CONFLICT, "users.username_exist", "该用户名已被占用")

    # 只能修改自己的资料
    NOT_OWNER = (HTTP_403_FORBIDDEN, "users.not_owner", "只能修改自己的资料")


class UserMsg:
    UPDATE_SUCCESS = "资料更新成功"
