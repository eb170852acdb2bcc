"""
File: app/domains/groups/dependencies.py
Description: 小组领域依赖注入 (DI)

依赖链：
DBSession → GroupRepository ─┐
SessionFactory ──────────────┴→ GroupService → GroupServiceDep

Author: jinmozhe
Created: 2026-03-07
"""

from typing import Annotated

from fastapi import Depends

from app.api.deps import DBSession, SessionFactory
from app.db.models.group import Group
from app.domains.groups.repository import GroupRepository
from app.domains.groups.service import GroupService


async def get_group_repository(session: DBSession) -> GroupRepository:
    return GroupRepository(model=Group, session=session)


GroupRepoDep = Annotated[GroupRepository, Depends(get_group_repository)]


async def get_group_service(
    repo: GroupRepoDep,
    session_factory: SessionFactory,
) -> GroupService:
    return GroupService(repo=repo, session_factory=session_factory)


GroupServiceDep = Annotated[GroupService, Depends(get_group_service)]
