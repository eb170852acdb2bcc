"""
File: app/db/seed.py
Description: 默认小组种子数据

groups 表为空时写入四个默认小组；非空时不做任何修改。
调用方式：
1. 应用启动时 (SEED_DEFAULT_GROUPS=true)，见 app.main.lifespan
2. 命令行: python -m app.db.seed

Author: jinmozhe
Created: 2026-03-09
"""

import asyncio

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.logging import logger, setup_logging
from app.db.models.group import Group

DEFAULT_GROUPS: list[dict[str, str]] = [
    {
        "name": "Tech",
        "description": "Discuss tech and career in tech",
        "category": "Career",
    },
    {
        "name": "Health & Wellness",
        "description": "General health discussions",
        "category": "Health",
    },
    {
        "name": "Career Support",
        "description": "Career advice and support",
        "category": "Career",
    },
    {
        "name": "Life Balance",
        "description": "Work-life balance discussions",
        "category": "Lifestyle",
    },
]


async def seed_default_groups(session: AsyncSession) -> int:
    """
    表为空时写入默认小组，返回写入数量。
    """
    result = await session.execute(select(func.count()).select_from(Group))
    if result.scalar_one() > 0:
        return 0

    session.add_all([Group(**data) for data in DEFAULT_GROUPS])
    await session.commit()

    logger.bind(count=len(DEFAULT_GROUPS)).info("Default groups seeded")
    return len(DEFAULT_GROUPS)


async def run_seed(session_factory: async_sessionmaker[AsyncSession]) -> int:
    async with session_factory() as session:
        return await seed_default_groups(session)


async def _main() -> None:
    from app.db.session import AsyncSessionLocal, close_engine

    setup_logging()
    try:
        await run_seed(AsyncSessionLocal)
    finally:
        await close_engine()


if __name__ == "__main__":
    asyncio.run(_main())
