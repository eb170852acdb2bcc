"""
File: app/core/error_code.py
Description: 错误码枚举基类与系统级错误

每个错误码是一个 Tuple(http_status, code, message)：
1. http_status: 映射的 HTTP 状态码
2. code: 字符串业务码，格式 domain.reason
3. message: 默认提示文案

各业务领域在自己的 constants.py 中继承 BaseErrorCode 定义错误。

Author: jinmozhe
Created: 2026-03-02
"""

from enum import Enum

from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_403_FORBIDDEN,
    HTTP_404_NOT_FOUND,
    HTTP_500_INTERNAL_SERVER_ERROR,
)


class BaseErrorCode(Enum):
    """错误码枚举基类"""

    @property
    def http_status(self) -> int:
        return self.value[0]

    @property
    def code(self) -> str:
        return self.value[1]

    @property
    def msg(self) -> str:
        return self.value[2]


class SystemErrorCode(BaseErrorCode):
    """系统通用错误 (参数校验 / 认证 / 系统故障)"""

    INVALID_PARAMS = (HTTP_400_BAD_REQUEST, "system.invalid_params", "参数校验失败")

    UNAUTHORIZED = (HTTP_401_UNAUTHORIZED, "system.unauthorized", "身份认证失败")
    TOKEN_EXPIRED = (HTTP_401_UNAUTHORIZED, "system.token_expired", "令牌已过期")

    FORBIDDEN = (HTTP_403_FORBIDDEN, "system.forbidden", "权限不足")

    NOT_FOUND = (HTTP_404_NOT_FOUND, "system.not_found", "资源不存在")

    INTERNAL_ERROR = (
        HTTP_500_INTERNAL_SERVER_ERROR,
        "system.internal_error",
        "系统内部错误",
    )
