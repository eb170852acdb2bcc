"""
File: app/domains/users/dependencies.py
Description: 用户领域依赖注入 (DI)

依赖链：
DBSession → UserRepository ─┐
SessionFactory ─────────────┴→ UserService → UserServiceDep

Router 层将直接使用 UserServiceDep，无需关心底层细节。

Author: jinmozhe
Created: 2026-03-06
"""

from typing import Annotated

from fastapi import Depends

from app.api.deps import DBSession, SessionFactory
from app.db.models.user import User
from app.domains.users.repository import UserRepository
from app.domains.users.service import UserService


async def get_user_repository(session: DBSession) -> UserRepository:
    return UserRepository(model=User, session=session)


UserRepoDep = Annotated[UserRepository, Depends(get_user_repository)]


async def get_user_service(
    repo: UserRepoDep,
    session_factory: SessionFactory,
) -> UserService:
    """
    获取用户服务实例 (UserService)。
    session_factory 供主页统计的并发计数使用。
    """
    return UserService(repo=repo, session_factory=session_factory)


UserServiceDep = Annotated[UserService, Depends(get_user_service)]
