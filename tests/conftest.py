"""
File: tests/conftest.py
Description: Pytest 全局 Fixtures 配置 (Async + 独立测试库)

1. 环境变量在导入 app 之前写入 (SECRET_KEY / SQLite DSN / 上传目录)
2. 每个测试函数使用独立的 SQLite 文件库，create_all 建表，测试间互不影响
3. client 覆写 get_db / get_session_factory / get_redis / get_upload_service
4. Redis 用内存实现替代，只覆盖 AuthService 用到的 get / setex / delete

注意：SQLite 的写锁是库级别的，
集成测试中的造数与断言都使用 session_factory 开短会话，不长期持有事务。

Author: jinmozhe
Created: 2026-03-10
"""

import asyncio
import os
import sys
import tempfile
from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import timedelta
from pathlib import Path
from typing import Any

# ------------------------------------------------------------------------------
# Windows 平台特定修复 (必须在任何 async 操作之前)
# ------------------------------------------------------------------------------
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

# ------------------------------------------------------------------------------
# 1. 环境配置覆写 (必须先于 app 导入)
# ------------------------------------------------------------------------------
os.environ["ENVIRONMENT"] = "test"
os.environ["SECRET_KEY"] = "test-secret-key-for-pytest-0123456789abcdef"
os.environ["SQLALCHEMY_DATABASE_URI"] = "sqlite+aiosqlite:///:memory:"
os.environ["SEED_DEFAULT_GROUPS"] = "false"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="community-uploads-")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from app.api.deps import get_db, get_session_factory
from app.core.redis import get_redis
from app.core.security import create_access_token, get_password_hash
from app.db.models import Base, Group, User
from app.db.session import build_engine, build_session_factory
from app.domains.uploads.dependencies import get_upload_service
from app.domains.uploads.service import UploadService
from app.main import app

TEST_PASSWORD = "secret-password"


# ------------------------------------------------------------------------------
# 2. 内存版 Redis
# ------------------------------------------------------------------------------


class FakeRedis:
    """只实现 refresh token 流程用到的命令，忽略 TTL"""

    def __init__(self) -> None:
        self.store: dict[str, str] = {}

    async def get(self, key: str) -> str | None:
        return self.store.get(key)

    async def setex(self, key: str, ttl: int | timedelta, value: Any) -> bool:
        self.store[key] = str(value)
        return True

    async def delete(self, *keys: str) -> int:
        removed = 0
        for key in keys:
            if self.store.pop(key, None) is not None:
                removed += 1
        return removed


# ------------------------------------------------------------------------------
# 3. 数据库 Fixtures
# ------------------------------------------------------------------------------


@pytest_asyncio.fixture(scope="function")
async def db_engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """
    每个测试一个 SQLite 文件库。
    文件库而非 :memory:，因为扇出查询需要多个连接看到同一份数据。
    """
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return build_session_factory(db_engine)


@pytest_asyncio.fixture(scope="function")
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest_asyncio.fixture(scope="function")
async def client(
    session_factory: async_sessionmaker[AsyncSession],
    fake_redis: FakeRedis,
    tmp_path: Path,
) -> AsyncGenerator[AsyncClient, None]:
    """
    获取异步 HTTP 客户端。
    每个请求从测试库的 session_factory 获取独立会话，与生产行为一致。
    """

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    async def override_get_redis() -> AsyncGenerator[FakeRedis, None]:
        yield fake_redis

    async def override_get_upload_service() -> UploadService:
        return UploadService(
            upload_dir=tmp_path / "uploads",
            url_prefix="/uploads",
            max_bytes=1024,
        )

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_redis] = override_get_redis
    app.dependency_overrides[get_upload_service] = override_get_upload_service

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"  # type: ignore
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


# ------------------------------------------------------------------------------
# 4. 造数工具
# ------------------------------------------------------------------------------

UserMaker = Callable[..., Awaitable[User]]
GroupMaker = Callable[..., Awaitable[Group]]


@pytest_asyncio.fixture(scope="function")
async def make_user(session_factory: async_sessionmaker[AsyncSession]) -> UserMaker:
    """
    直接写库创建用户 (跳过注册接口)，密码统一为 TEST_PASSWORD。
    """
    hashed = get_password_hash(TEST_PASSWORD)

    async def _make(username: str, *, is_admin: bool = False, **fields: Any) -> User:
        async with session_factory() as session:
            user = User(
                username=username,
                password=hashed,
                display_name=fields.pop("display_name", username.title()),
                is_admin=is_admin,
                **fields,
            )
            session.add(user)
            await session.commit()
            return user

    return _make


@pytest_asyncio.fixture(scope="function")
async def make_group(session_factory: async_sessionmaker[AsyncSession]) -> GroupMaker:
    async def _make(name: str = "Tech", **fields: Any) -> Group:
        async with session_factory() as session:
            group = Group(
                name=name,
                description=fields.pop("description", f"{name} discussions"),
                category=fields.pop("category", "General"),
                **fields,
            )
            session.add(group)
            await session.commit()
            return group

    return _make


@pytest.fixture
def auth_headers() -> Callable[[User], dict[str, str]]:
    """为指定用户签发 Access Token 并构造请求头"""

    def _headers(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(subject=user.id)}"}

    return _headers
