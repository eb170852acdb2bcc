"""
File: app/core/security.py
Description: 安全工具 (Argon2id 密码哈希 + JWT)

1. 密码哈希 / 校验: pwdlib (argon2)
2. Access Token 签发与解析: python-jose
3. CPU 密集的哈希运算提供 async 版本，放到线程池执行

Author: jinmozhe
Created: 2026-03-03
"""

from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt
from pwdlib import PasswordHash
from starlette.concurrency import run_in_threadpool

from app.core.config import settings

password_hash = PasswordHash.recommended()

ACCESS_TOKEN_TYPE = "access"


# ------------------------------------------------------------------------------
# Password
# ------------------------------------------------------------------------------


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return password_hash.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return password_hash.hash(password)


async def verify_password_async(plain_password: str, hashed_password: str) -> bool:
    """线程池中校验密码，避免阻塞事件循环"""
    return await run_in_threadpool(verify_password, plain_password, hashed_password)


async def get_password_hash_async(password: str) -> str:
    """线程池中计算哈希，避免阻塞事件循环"""
    return await run_in_threadpool(get_password_hash, password)


# ------------------------------------------------------------------------------
# JWT
# ------------------------------------------------------------------------------


def _secret_key() -> str:
    secret_key = settings.SECRET_KEY
    if secret_key is None:
        raise ValueError("SECRET_KEY configuration is missing.")
    return secret_key


def create_access_token(
    subject: str | Any, expires_delta: timedelta | None = None
) -> str:
    """
    签发 Access Token。

    Args:
        subject: 用户 ID (写入 sub)
        expires_delta: 有效期，默认 ACCESS_TOKEN_EXPIRE_MINUTES
    """
    expire = datetime.now(UTC) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode = {"exp": expire, "sub": str(subject), "type": ACCESS_TOKEN_TYPE}
    return jwt.encode(to_encode, _secret_key(), algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> int | None:
    """
    解析 Access Token，返回用户 ID。
    签名错误、过期、类型不符、sub 非整数时返回 None。
    """
    try:
        payload = jwt.decode(token, _secret_key(), algorithms=[settings.ALGORITHM])
    except JWTError:
        return None

    if payload.get("type") != ACCESS_TOKEN_TYPE:
        return None

    sub = payload.get("sub")
    try:
        return int(sub)
    except (TypeError, ValueError):
        return None
