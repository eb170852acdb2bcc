"""
File: app/api_router.py
Description: 根 API 路由聚合层

本模块负责：
1. 聚合所有业务领域的 Router (auth, users, social, groups, posts, uploads)
2. 统一设置路由前缀与 OpenAPI 标签

注意：users 与 social 共用 /users 前缀，
users_router 中的 /me 系列路由需先于 /{user_id} 注册。

Author: jinmozhe
Created: 2026-03-03
"""

from fastapi import APIRouter

from app.domains.auth.router import router as auth_router
from app.domains.groups.router import router as groups_router
from app.domains.posts.router import router as posts_router
from app.domains.social.router import router as social_router
from app.domains.uploads.router import router as uploads_router
from app.domains.users.router import router as users_router

api_router = APIRouter()

# ------------------------------------------------------------------------------
# 注册领域路由
# ------------------------------------------------------------------------------

# 1. 认证
api_router.include_router(auth_router, prefix="/auth", tags=["auth"])

# 2. 用户资料与主页聚合
api_router.include_router(users_router, prefix="/users", tags=["users"])

# 3. 好友 / 关注
api_router.include_router(social_router, prefix="/users", tags=["social"])

# 4. 小组、成员、小组帖子、聊天
api_router.include_router(groups_router, prefix="/groups", tags=["groups"])

# 5. 帖子、评论、点赞、表情
api_router.include_router(posts_router, prefix="/posts", tags=["posts"])

# 6. 文件上传
api_router.include_router(uploads_router, prefix="/uploads", tags=["uploads"])
