"""
File: app/domains/auth/service.py
Description: 认证领域服务 (Service)

本模块封装认证核心业务逻辑：
1. 登录校验: 验证用户名与密码，签发双 Token
2. 刷新令牌: 验证 Redis 中的 Refresh Token，执行旋转策略 (Rotation)
3. 用户登出: 销毁 Refresh Token
4. 依赖注入: 依赖 UserRepository (查用户) 和 Redis (存 Token)

Author: jinmozhe
Created: 2026-03-03
"""

import secrets
from datetime import timedelta

from redis.asyncio import Redis

from app.core.config import settings
from app.core.exceptions import AppException
from app.core.logging import logger
from app.core.security import create_access_token, verify_password_async
from app.domains.auth.constants import REFRESH_TOKEN_KEY_PREFIX, AuthError
from app.domains.auth.schemas import LoginRequest, Token
from app.domains.users.repository import UserRepository


class AuthService:
    """
    认证服务类。
    """

    def __init__(self, user_repo: UserRepository, redis: Redis):
        self.user_repo = user_repo
        self.redis = redis

    async def login(self, login_data: LoginRequest) -> Token:
        """
        用户登录流程。

        流程:
        1. 按用户名查库
        2. 验证密码哈希 (线程池)
        3. 生成 Access Token (JWT) + Refresh Token (Redis)
        """
        user = await self.user_repo.get_by_username(login_data.username)

        # 用户不存在与密码错误抛出同一错误，响应完全一致
        if not user:
            raise AppException(AuthError.INVALID_CREDENTIALS)

        if not await verify_password_async(login_data.password, user.password):
            raise AppException(AuthError.INVALID_CREDENTIALS)

        logger.bind(user_id=user.id).info("User logged in")
        return await self._create_tokens(user_id=str(user.id))

    async def refresh_token(self, refresh_token: str) -> Token:
        """
        使用 Refresh Token 换取新 Token (Token Rotation)。
        旧 Token 立即销毁，一次性使用。
        """
        redis_key = f"{REFRESH_TOKEN_KEY_PREFIX}{refresh_token}"
        user_id = await self.redis.get(redis_key)

        if not user_id:
            raise AppException(AuthError.INVALID_REFRESH_TOKEN)

        if isinstance(user_id, bytes):
            user_id = user_id.decode("utf-8")

        # 用户在 token 有效期内可能已不存在
        if await self.user_repo.get(int(user_id)) is None:
            await self.redis.delete(redis_key)
            raise AppException(AuthError.INVALID_REFRESH_TOKEN)

        await self.redis.delete(redis_key)
        return await self._create_tokens(user_id=user_id)

    async def logout(self, refresh_token: str) -> None:
        await self.redis.delete(f"{REFRESH_TOKEN_KEY_PREFIX}{refresh_token}")

    async def _create_tokens(self, user_id: str) -> Token:
        """
        [内部方法] 构造 Token 响应并持久化 Refresh Token。
        """
        access_token = create_access_token(subject=user_id)

        # 高熵随机串，约 43 字符
        refresh_token = secrets.token_urlsafe(32)

        await self.redis.setex(
            f"{REFRESH_TOKEN_KEY_PREFIX}{refresh_token}",
            timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
            user_id,
        )

        return Token(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
            token_type="bearer",
        )
