"""
File: app/domains/social/dependencies.py
Description: 社交关系领域依赖注入 (DI)

依赖链：
DBSession → SocialRepository → SocialService → SocialServiceDep

Author: jinmozhe
Created: 2026-03-08
"""

from typing import Annotated

from fastapi import Depends

from app.api.deps import DBSession
from app.db.models.social import FriendRequest
from app.domains.social.repository import SocialRepository
from app.domains.social.service import SocialService


async def get_social_repository(session: DBSession) -> SocialRepository:
    return SocialRepository(model=FriendRequest, session=session)


SocialRepoDep = Annotated[SocialRepository, Depends(get_social_repository)]


async def get_social_service(repo: SocialRepoDep) -> SocialService:
    return SocialService(repo=repo)


SocialServiceDep = Annotated[SocialService, Depends(get_social_service)]
