"""
File: app/core/redis.py
Description: Redis 客户端 (redis.asyncio)

只用于存放 Refresh Token (key: refresh_token:<token> -> user_id)。
decode_responses=True，读出即为 str。

Author: jinmozhe
Created: 2026-03-03
"""

from collections.abc import AsyncGenerator

from redis.asyncio import Redis, from_url

from app.core.config import settings

# from_url 只创建连接池，不会立即建立连接
redis_client: Redis = from_url(
    settings.REDIS_URL,
    encoding="utf-8",
    decode_responses=True,
)


async def get_redis() -> AsyncGenerator[Redis, None]:
    """
    Redis 依赖。
    测试中通过 app.dependency_overrides[get_redis] 替换。
    """
    yield redis_client


async def close_redis() -> None:
    """lifespan 关闭阶段调用"""
    await redis_client.aclose()
