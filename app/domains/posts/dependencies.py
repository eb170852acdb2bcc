"""
File: app/domains/posts/dependencies.py
Description: 帖子领域依赖注入 (DI)

依赖链：
DBSession → PostRepository → PostService → PostServiceDep

Author: jinmozhe
Created: 2026-03-07
"""

from typing import Annotated

from fastapi import Depends

from app.api.deps import DBSession
from app.db.models.post import Post
from app.domains.posts.repository import PostRepository
from app.domains.posts.service import PostService


async def get_post_repository(session: DBSession) -> PostRepository:
    return PostRepository(model=Post, session=session)


PostRepoDep = Annotated[PostRepository, Depends(get_post_repository)]


async def get_post_service(repo: PostRepoDep) -> PostService:
    return PostService(repo=repo)


PostServiceDep = Annotated[PostService, Depends(get_post_service)]
