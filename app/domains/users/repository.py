"""
File: app/domains/users/repository.py
Description: 用户领域仓储层 (Repository)

本模块负责用户数据的数据库访问，继承自通用 BaseRepository。
扩展功能：
1. get_by_username: 根据用户名查询 (登录 / 注册唯一性校验)
2. count_*: 主页统计使用的计数查询

Author: jinmozhe
Created: 2026-03-06
"""

from sqlalchemy import func, select

from app.db.models.post import Post
from app.db.models.social import Follower, Friendship
from app.db.models.user import User
from app.db.repositories.base import BaseRepository
from app.domains.users.schemas import UserCreate, UserUpdate


class UserRepository(BaseRepository[User, UserCreate, UserUpdate]):
    """
    用户仓储类。
    继承了 BaseRepository 的 create/update/get 方法。
    """

    async def get_by_username(self, username: str) -> User | None:
        stmt = select(User).where(User.username == username)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    # --------------------------------------------------------------------------
    # 统计
    # --------------------------------------------------------------------------

    async def _scalar_count(self, stmt) -> int:
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def count_posts(self, user_id: int) -> int:
        return await self._scalar_count(
            select(func.count()).select_from(Post).where(Post.user_id == user_id)
        )

    async def count_friends(self, user_id: int) -> int:
        return await self._scalar_count(
            select(func.count())
            .select_from(Friendship)
            .where(Friendship.user_id == user_id)
        )

    async def count_followers(self, user_id: int) -> int:
        return await self._scalar_count(
            select(func.count())
            .select_from(Follower)
            .where(Follower.following_id == user_id)
        )

    async def count_following(self, user_id: int) -> int:
        return await self._scalar_count(
            select(func.count())
            .select_from(Follower)
            .where(Follower.follower_id == user_id)
        )
