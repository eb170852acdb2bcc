"""
File: app/utils/masking.py
Description: 日志脱敏工具

参数校验失败时，pydantic 的错误详情会带上原始输入 (input)，
其中可能包含注册/登录时提交的明文密码或令牌。
本模块在写日志、回传错误详情之前对这些字段做递归掩码。

Author: jinmozhe
Created: 2026-03-04
"""

from typing import Any

# 大小写不敏感
SENSITIVE_KEYS = frozenset(
    {
        "password",
        "new_password",
        "old_password",
        "secret",
        "token",
        "access_token",
        "refresh_token",
        "authorization",
    }
)

MASK = "******"


def mask_sensitive_data(data: Any) -> Any:
    """
    递归遍历 dict / list / tuple，将敏感 Key 对应的值替换为掩码。
    返回新对象，不修改入参。
    """
    if isinstance(data, dict):
        return {
            k: (
                MASK
                if isinstance(k, str) and k.lower() in SENSITIVE_KEYS
                else mask_sensitive_data(v)
            )
            for k, v in data.items()
        }

    if isinstance(data, (list, tuple)):
        return [mask_sensitive_data(item) for item in data]

    return data
