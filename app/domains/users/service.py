"""
File: app/domains/users/service.py
Description: 用户领域服务 (业务逻辑层)

本模块封装用户管理的核心业务逻辑：
1. 用户注册 (创建)：校验用户名唯一性、哈希密码、写入数据库
2. 用户查询：通过 ID / 用户名获取用户
3. 资料更新：只允许修改资料与主页定制字段
4. 主页统计：四个计数查询并发执行

注意：
- 所有数据库写操作的事务提交 (Commit) 由本层负责。
- 密码哈希使用异步版本函数，避免阻塞事件循环。

Author: jinmozhe
Created: 2026-03-06
"""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.exceptions import AppException
from app.core.logging import logger
from app.core.security import get_password_hash_async
from app.db.models.user import User
from app.db.session import gather_in_sessions
from app.domains.users.constants import UserError
from app.domains.users.repository import UserRepository
from app.domains.users.schemas import UserCreate, UserStats, UserUpdate


class UserService:
    """
    用户领域服务。
    """

    def __init__(
        self,
        repo: UserRepository,
        session_factory: async_sessionmaker[AsyncSession],
    ):
        self.repo = repo
        self.session_factory = session_factory

    async def create(self, obj_in: UserCreate) -> User:
        """
        创建新用户 (注册)。is_admin 恒为 False。
        """
        # 1. 唯一性校验 (Fail Fast)
        if await self.repo.get_by_username(obj_in.username):
            raise AppException(UserError.USERNAME_EXIST)

        # 2. 密码加密
        hashed_password = await get_password_hash_async(obj_in.password)

        # 3. 持久化与事务提交
        user_data = obj_in.model_dump(exclude={"password"}, exclude_none=True)
        user_data.update(password=hashed_password, is_admin=False)

        try:
            user = await self.repo.create(user_data)
            await self.repo.session.commit()
        except IntegrityError:
            # 并发注册同名用户时由唯一约束兜底
            await self.repo.session.rollback()
            raise AppException(UserError.USERNAME_EXIST) from None

        logger.bind(user_id=user.id, username=user.username).info(
            "User created successfully"
        )
        return user

    async def get(self, user_id: int) -> User | None:
        return await self.repo.get(user_id)

    async def get_or_404(self, user_id: int) -> User:
        user = await self.repo.get(user_id)
        if user is None:
            raise AppException(UserError.USER_NOT_FOUND)
        return user

    async def get_by_username(self, username: str) -> User | None:
        return await self.repo.get_by_username(username)

    async def update(self, user_id: int, obj_in: UserUpdate) -> User | None:
        """
        更新个人资料 (PATCH 语义)，用户不存在时返回 None。
        """
        user = await self.repo.get(user_id)
        if user is None:
            return None

        updated_user = await self.repo.update(user, obj_in.model_dump(exclude_unset=True))
        await self.repo.session.commit()

        logger.bind(user_id=user_id).info("User profile updated")
        return updated_user

    async def get_user_stats(self, user_id: int) -> UserStats:
        """
        发帖数 / 好友数 / 粉丝数 / 关注数，四个查询各自独立 Session 并发执行。
        """

        def _counter(name: str):
            async def _read(session: AsyncSession) -> int:
                repo = UserRepository(model=User, session=session)
                return await getattr(repo, name)(user_id)

            return _read

        post_count, friend_count, follower_count, following_count = (
            await gather_in_sessions(
                self.session_factory,
                _counter("count_posts"),
                _counter("count_friends"),
                _counter("count_followers"),
                _counter("count_following"),
            )
        )

        return UserStats(
            post_count=post_count,
            friend_count=friend_count,
            follower_count=follower_count,
            following_count=following_count,
        )
