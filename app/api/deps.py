"""
File: app/api/deps.py
Description: 全局依赖注入定义 (DB Session + Session Factory + Authentication)

本模块负责：
1. get_db / DBSession: 每个请求一个 AsyncSession (请求结束自动关闭，未提交的事务回滚)
2. get_session_factory / SessionFactory: 扇出并发查询使用的 Session 工厂
3. get_current_user / CurrentUser: 解析 Bearer JWT 并加载当前用户
4. get_current_admin / AdminUser: 管理员权限校验

存储对象全部通过依赖注入传入路由层，测试中用 dependency_overrides 替换。

Author: jinmozhe
Created: 2026-03-03
"""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.error_code import SystemErrorCode
from app.core.exceptions import AppException
from app.core.security import decode_access_token
from app.db.models.user import User
from app.db.session import AsyncSessionLocal

# ------------------------------------------------------------------------------
# 1. Database
# ------------------------------------------------------------------------------


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        yield session


DBSession = Annotated[AsyncSession, Depends(get_db)]


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    return AsyncSessionLocal


SessionFactory = Annotated[async_sessionmaker[AsyncSession], Depends(get_session_factory)]


# ------------------------------------------------------------------------------
# 2. Authentication (Bearer JWT)
# ------------------------------------------------------------------------------


async def get_token_from_header(
    authorization: Annotated[str | None, Header()] = None,
) -> str:
    """
    Authorization: Bearer <token>
    """
    if not authorization:
        raise AppException(
            SystemErrorCode.UNAUTHORIZED, message="Missing Authorization Header"
        )

    scheme, _, param = authorization.partition(" ")
    if scheme.lower() != "bearer" or not param:
        raise AppException(
            SystemErrorCode.UNAUTHORIZED, message="Invalid Authentication Scheme"
        )

    return param


async def get_current_user(
    token: Annotated[str, Depends(get_token_from_header)],
    session: DBSession,
) -> User:
    """
    1. 校验 JWT 签名 / 有效期 / 类型
    2. 按 sub 查库，用户不存在同样视为认证失败
    """
    user_id = decode_access_token(token)
    if user_id is None:
        raise AppException(SystemErrorCode.TOKEN_EXPIRED, message="Invalid or expired token")

    user = await session.get(User, user_id)
    if user is None:
        raise AppException(SystemErrorCode.UNAUTHORIZED, message="User not found")

    return user


CurrentUser = Annotated[User, Depends(get_current_user)]


async def get_current_admin(current_user: CurrentUser) -> User:
    if not current_user.is_admin:
        raise AppException(SystemErrorCode.FORBIDDEN)
    return current_user


AdminUser = Annotated[User, Depends(get_current_admin)]
