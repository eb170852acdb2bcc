"""
File: app/domains/auth/constants.py
Description: 认证领域常量定义 (错误码 + 成功提示)
Namespace: auth.*

1. Error 定义: 继承 BaseErrorCode，包含 (HTTP状态, 业务码, 默认文案)
2. Msg 定义: 纯字符串常量，用于 Router 返回成功响应

Author: jinmozhe
Created: 2026-03-03
"""

from starlette.status import HTTP_401_UNAUTHORIZED

from app.core.error_code import BaseErrorCode

# Redis Key 前缀: refresh_token:<token> -> user_id
REFRESH_TOKEN_KEY_PREFIX = "refresh_token:"


class AuthError(BaseErrorCode):
    """
    认证领域错误定义
    Tuple Structure: (HTTP_Status, Code_String, Default_Message)
    """

    # 用户不存在与密码错误使用同一错误，防止用户名枚举
    INVALID_CREDENTIALS = (
        HTTP_401_UNAUTHORIZED,
        "auth.invalid_credentials",
        "用户名或密码错误",
    )

    INVALID_REFRESH_TOKEN = (
        HTTP_401_UNAUTHORIZED,
        "auth.invalid_refresh_token",
        "Refresh token 无效或已过期",
    )


class AuthMsg:
    """
    认证领域成功提示文案
    """

    LOGIN_SUCCESS = "登录成功"
    REGISTER_SUCCESS = "注册成功"
    LOGOUT_SUCCESS = "已安全退出"
    REFRESH_SUCCESS = "令牌刷新成功"
