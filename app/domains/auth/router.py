"""
File: app/domains/auth/router.py
Description: 认证领域 HTTP 路由层

本模块定义认证相关的 API 端点：
1. POST /register: 注册 (公开)
2. POST /login: 登录 (返回双 Token)
3. POST /refresh: 刷新 (旋转策略，返回新双 Token)
4. POST /logout: 登出 (销毁 Refresh Token)

Author: jinmozhe
Created: 2026-03-03
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from redis.asyncio import Redis

from app.core.redis import get_redis
from app.core.response import ResponseModel
from app.domains.auth.constants import AuthMsg
from app.domains.auth.schemas import LoginRequest, RefreshRequest, Token
from app.domains.auth.service import AuthService
from app.domains.users.dependencies import UserRepoDep, UserServiceDep
from app.domains.users.schemas import UserCreate, UserRead

router = APIRouter()

# ------------------------------------------------------------------------------
# 依赖注入构造器 (Dependencies)
# ------------------------------------------------------------------------------


async def get_auth_service(
    user_repo: UserRepoDep,
    redis: Annotated[Redis, Depends(get_redis)],
) -> AuthService:
    """
    构造 AuthService 实例。
    复用 users 领域的 Repository，并注入 Redis 客户端。
    """
    return AuthService(user_repo=user_repo, redis=redis)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]


# ------------------------------------------------------------------------------
# Endpoints (路由定义)
# ------------------------------------------------------------------------------


@router.post(
    "/register",
    response_model=ResponseModel[UserRead],
    status_code=status.HTTP_201_CREATED,
    summary="注册新用户",
    description="用户名必须唯一；密码以 Argon2id 哈希存储。无需登录。",
)
async def register(
    request: Request,
    user_in: UserCreate,
    service: UserServiceDep,
) -> ResponseModel[UserRead]:
    user = await service.create(user_in)
    req_id = getattr(request.state, "request_id", None)
    return ResponseModel.success(
        data=UserRead.model_validate(user),
        message=AuthMsg.REGISTER_SUCCESS,
        request_id=req_id,
    )


@router.post(
    "/login",
    response_model=ResponseModel[Token],
    summary="用户登录",
    description="使用用户名密码登录，成功后返回 Access Token (JWT) 和 Refresh Token。",
)
async def login(
    request: Request,
    login_data: LoginRequest,
    service: AuthServiceDep,
) -> ResponseModel[Token]:
    token = await service.login(login_data)
    req_id = getattr(request.state, "request_id", None)
    return ResponseModel.success(
        data=token, message=AuthMsg.LOGIN_SUCCESS, request_id=req_id
    )


@router.post(
    "/refresh",
    response_model=ResponseModel[Token],
    summary="刷新令牌 (续期)",
    description="使用有效的 Refresh Token 换取新的一对 Token (Token Rotation 策略)。旧 Token 将失效。",
)
async def refresh_token(
    request: Request,
    refresh_data: RefreshRequest,
    service: AuthServiceDep,
) -> ResponseModel[Token]:
    token = await service.refresh_token(refresh_data.refresh_token)
    req_id = getattr(request.state, "request_id", None)
    return ResponseModel.success(
        data=token, message=AuthMsg.REFRESH_SUCCESS, request_id=req_id
    )


@router.post(
    "/logout",
    response_model=ResponseModel[None],
    summary="用户登出",
    description="销毁服务端存储的 Refresh Token，使该会话失效。",
)
async def logout(
    request: Request,
    refresh_data: RefreshRequest,
    service: AuthServiceDep,
) -> ResponseModel[None]:
    await service.logout(refresh_data.refresh_token)
    req_id = getattr(request.state, "request_id", None)
    return ResponseModel.success(
        data=None, message=AuthMsg.LOGOUT_SUCCESS, request_id=req_id
    )
