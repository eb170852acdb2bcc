"""
File: app/db/session.py
Description: 数据库会话管理 (Async SQLAlchemy)

本模块负责：
1. build_engine: 按 DSN 创建 AsyncEngine
   - PostgreSQL (asyncpg): 使用配置中的连接池参数
   - SQLite (aiosqlite): 本地开发/测试用，连接建立时开启外键约束
2. build_session_factory: 创建 AsyncSession 工厂
3. 全局 engine / AsyncSessionLocal (由 api.deps 注入到路由层)
4. gather_in_sessions: 扇出只读查询，每个查询独立 Session 并发执行
5. JSON 列统一使用 orjson 序列化

Author: jinmozhe
Created: 2026-03-02
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

import orjson
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.core.config import settings


def _orjson_serializer(obj: Any) -> str:
    # orjson 返回 bytes，SQLAlchemy 需要 str
    return orjson.dumps(obj).decode("utf-8")


def _orjson_deserializer(obj: str | bytes) -> Any:
    return orjson.loads(obj)


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(url: str, echo: bool = False) -> AsyncEngine:
    """
    按 DSN 创建异步引擎。
    SQLite 不接受 pool_size / max_overflow 等参数，只对 PostgreSQL 传入。
    """
    kwargs: dict[str, Any] = {
        "echo": echo,
        "json_serializer": _orjson_serializer,
        "json_deserializer": _orjson_deserializer,
    }

    if url.startswith("sqlite"):
        engine = create_async_engine(url, **kwargs)
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    kwargs.update(
        pool_pre_ping=settings.DB_POOL_PRE_PING,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
    )
    return create_async_engine(url, **kwargs)


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    expire_on_commit=False: commit 后仍可访问 ORM 属性，
    Async 模式下不允许隐式 IO 刷新。
    """
    return async_sessionmaker(
        bind=bind,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )


engine: AsyncEngine = build_engine(
    str(settings.SQLALCHEMY_DATABASE_URI), echo=settings.is_debug
)

AsyncSessionLocal: async_sessionmaker[AsyncSession] = build_session_factory(engine)


async def close_engine() -> None:
    """lifespan 关闭阶段释放连接池"""
    await engine.dispose()


async def gather_in_sessions(
    session_factory: async_sessionmaker[AsyncSession],
    *readers: Callable[[AsyncSession], Awaitable[Any]],
) -> list[Any]:
    """
    并发执行多个只读查询，每个查询使用独立的 Session。

    一个 AsyncSession 同一时刻只能执行一条语句，
    因此扇出查询 (小组详情、用户统计) 必须各自持有连接。
    结果顺序与 readers 参数顺序一致。
    """

    async def _run(reader: Callable[[AsyncSession], Awaitable[Any]]) -> Any:
        async with session_factory() as session:
            return await reader(session)

    return list(await asyncio.gather(*(_run(reader) for reader in readers)))
