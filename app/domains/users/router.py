"""
File: app/domains/users/router.py
Description: 用户领域 HTTP 路由层

本模块定义了用户资料与个人主页聚合数据的 API 端点：
1. GET /users/me, /users/me/groups: 当前用户资料 / 已加入的小组
2. GET /users/{id}: 公开资料 (不含密码)
3. PATCH /users/{id}: 修改资料，只能修改自己 (403)
4. GET /users/{id}/posts|groups|group-posts|stats: 主页聚合数据

注册接口位于 /auth/register。
/me 路由必须声明在 /{user_id} 之前。

Author: jinmozhe
Created: 2026-03-06
"""

from typing import Annotated

from fastapi import APIRouter, Query, Request

from app.api.deps import CurrentUser
from app.core.config import settings
from app.core.exceptions import AppException
from app.core.response import ResponseModel
from app.domains.groups.dependencies import GroupServiceDep
from app.domains.groups.schemas import GroupRead
from app.domains.posts.dependencies import PostServiceDep
from app.domains.posts.schemas import PostRead
from app.domains.users.constants import UserError, UserMsg
from app.domains.users.dependencies import UserServiceDep
from app.domains.users.schemas import UserRead, UserStats, UserUpdate

router = APIRouter()


# ------------------------------------------------------------------------------
# Current User (当前登录用户)
# ------------------------------------------------------------------------------


@router.get(
    "/me",
    response_model=ResponseModel[UserRead],
    summary="获取我的个人资料",
)
async def read_user_me(
    request: Request,
    current_user: CurrentUser,
) -> ResponseModel[UserRead]:
    # current_user 已经在 deps.py 中完成了鉴权与查库
    req_id = getattr(request.state, "request_id", None)
    return ResponseModel.success(
        data=UserRead.model_validate(current_user), request_id=req_id
    )


@router.get(
    "/me/groups",
    response_model=ResponseModel[list[GroupRead]],
    summary="我加入的小组",
)
async def read_my_groups(
    request: Request,
    current_user: CurrentUser,
    group_service: GroupServiceDep,
) -> ResponseModel[list[GroupRead]]:
    groups = await group_service.get_user_groups(current_user.id)
    req_id = getattr(request.state, "request_id", None)
    return ResponseModel.success(
        data=[GroupRead.model_validate(g) for g in groups], request_id=req_id
    )


# ------------------------------------------------------------------------------
# Profile (个人资料)
# ------------------------------------------------------------------------------


@router.get(
    "/{user_id}",
    response_model=ResponseModel[UserRead],
    summary="获取用户资料",
)
async def read_user(
    request: Request,
    user_id: int,
    service: UserServiceDep,
) -> ResponseModel[UserRead]:
    user = await service.get_or_404(user_id)
    req_id = getattr(request.state, "request_id", None)
    return ResponseModel.success(data=UserRead.model_validate(user), request_id=req_id)


@router.patch(
    "/{user_id}",
    response_model=ResponseModel[UserRead],
    summary="更新个人资料",
    description="只能修改自己的资料与主页定制项；用户名、密码、管理员标记不可通过此接口修改。",
)
async def update_user(
    request: Request,
    user_id: int,
    user_in: UserUpdate,
    current_user: CurrentUser,
    service: UserServiceDep,
) -> ResponseModel[UserRead]:
    if user_id != current_user.id:
        raise AppException(UserError.NOT_OWNER)

    updated_user = await service.update(user_id, user_in)
    if updated_user is None:
        raise AppException(UserError.USER_NOT_FOUND)

    req_id = getattr(request.state, "request_id", None)
    return ResponseModel.success(
        data=UserRead.model_validate(updated_user),
        message=UserMsg.UPDATE_SUCCESS,
        request_id=req_id,
    )


# ------------------------------------------------------------------------------
# Aggregates (主页聚合)
# ------------------------------------------------------------------------------


@router.get(
    "/{user_id}/posts",
    response_model=ResponseModel[list[PostRead]],
    summary="用户发布的帖子",
)
async def read_user_posts(
    request: Request,
    user_id: int,
    service: UserServiceDep,
    post_service: PostServiceDep,
) -> ResponseModel[list[PostRead]]:
    await service.get_or_404(user_id)
    posts = await post_service.get_user_posts(user_id)

    req_id = getattr(request.state, "request_id", None)
    return ResponseModel.success(
        data=[PostRead.model_validate(p) for p in posts], request_id=req_id
    )


@router.get(
    "/{user_id}/group-posts",
    response_model=ResponseModel[list[PostRead]],
    summary="用户所在小组的帖子",
    description="用户加入的全部小组中的帖子，最新在前，分页返回。",
)
async def read_user_group_posts(
    request: Request,
    user_id: int,
    service: UserServiceDep,
    post_service: PostServiceDep,
    limit: Annotated[
        int, Query(ge=1, le=settings.USER_GROUP_POSTS_MAX_LIMIT)
    ] = settings.USER_GROUP_POSTS_DEFAULT_LIMIT,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> ResponseModel[list[PostRead]]:
    await service.get_or_404(user_id)
    posts = await post_service.get_user_group_posts(user_id, limit=limit, offset=offset)

    req_id = getattr(request.state, "request_id", None)
    return ResponseModel.success(
        data=[PostRead.model_validate(p) for p in posts], request_id=req_id
    )


@router.get(
    "/{user_id}/groups",
    response_model=ResponseModel[list[GroupRead]],
    summary="用户加入的小组",
)
async def read_user_groups(
    request: Request,
    user_id: int,
    service: UserServiceDep,
    group_service: GroupServiceDep,
) -> ResponseModel[list[GroupRead]]:
    await service.get_or_404(user_id)
    groups = await group_service.get_user_groups(user_id)

    req_id = getattr(request.state, "request_id", None)
    return ResponseModel.success(
        data=[GroupRead.model_validate(g) for g in groups], request_id=req_id
    )


@router.get(
    "/{user_id}/stats",
    response_model=ResponseModel[UserStats],
    summary="用户主页统计",
    description="发帖数 / 好友数 / 粉丝数 / 关注数，实时计算。",
)
async def read_user_stats(
    request: Request,
    user_id: int,
    service: UserServiceDep,
) -> ResponseModel[UserStats]:
    await service.get_or_404(user_id)
    stats = await service.get_user_stats(user_id)

    req_id = getattr(request.state, "request_id", None)
    return ResponseModel.success(data=stats, request_id=req_id)
