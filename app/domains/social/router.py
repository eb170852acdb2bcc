"""
File: app/domains/social/router.py
Description: 社交关系 HTTP 路由层 (挂载在 /users 下)

1. GET /users/me/friend-requests: 收到的好友申请
2. GET /users/{id}/friends|followers|following
3. GET /users/{id}/is-following: 当前用户是否关注了该用户
4. POST /users/{id}/follow|unfollow
5. POST /users/{id}/friend-request: 向该用户发送申请
6. POST /users/{id}/accept-friend|reject-friend: 处理该用户发给我的申请

路径中的 {id} 始终是"对方"，当前用户来自 Token。

Author: jinmozhe
Created: 2026-03-08
"""

from typing import Annotated

from fastapi import APIRouter, Query, Request

from app.api.deps import CurrentUser
from app.core.exceptions import AppException
from app.core.response import ResponseModel
from app.db.models.social import FriendRequestStatus
from app.domains.social.constants import SocialError, SocialMsg
from app.domains.social.dependencies import SocialServiceDep
from app.domains.social.schemas import FriendRequestRead, RelationChange
from app.domains.users.dependencies import UserServiceDep
from app.domains.users.schemas import UserBrief

router = APIRouter()


def _reject_self(current_user_id: int, target_id: int) -> None:
    if current_user_id == target_id:
        raise AppException(SocialError.SELF_ACTION)


# ------------------------------------------------------------------------------
# Friend Requests
# ------------------------------------------------------------------------------


@router.get(
    "/me/friend-requests",
    response_model=ResponseModel[list[FriendRequestRead]],
    summary="我收到的好友申请",
    description="最新在前，可用 status 过滤 (pending / accepted / rejected)。",
)
async def list_my_friend_requests(
    request: Request,
    current_user: CurrentUser,
    service: SocialServiceDep,
    status: Annotated[FriendRequestStatus | None, Query()] = None,
) -> ResponseModel[list[FriendRequestRead]]:
    requests = await service.get_friend_requests(current_user.id, status)
    req_id = getattr(request.state, "request_id", None)
    return ResponseModel.success(data=requests, request_id=req_id)


@router.post(
    "/{user_id}/friend-request",
    response_model=ResponseModel[RelationChange],
    summary="发送好友申请",
    description="幂等：同方向已有申请时 changed=false。",
)
async def send_friend_request(
    request: Request,
    user_id: int,
    current_user: CurrentUser,
    service: SocialServiceDep,
    user_service: UserServiceDep,
) -> ResponseModel[RelationChange]:
    _reject_self(current_user.id, user_id)
    await user_service.get_or_404(user_id)

    changed = await service.send_friend_request(current_user.id, user_id)

    req_id = getattr(request.state, "request_id", None)
    return ResponseModel.success(
        data=RelationChange(user_id=current_user.id, target_id=user_id, changed=changed),
        message=SocialMsg.REQUEST_SENT,
        request_id=req_id,
    )


@router.post(
    "/{user_id}/accept-friend",
    response_model=ResponseModel[RelationChange],
    summary="接受好友申请",
)
async def accept_friend_request(
    request: Request,
    user_id: int,
    current_user: CurrentUser,
    service: SocialServiceDep,
) -> ResponseModel[RelationChange]:
    if not await service.accept_friend_request(user_id, current_user.id):
        raise AppException(SocialError.REQUEST_NOT_PENDING)

    req_id = getattr(request.state, "request_id", None)
    return ResponseModel.success(
        data=RelationChange(user_id=current_user.id, target_id=user_id, changed=True),
        message=SocialMsg.REQUEST_ACCEPTED,
        request_id=req_id,
    )


@router.post(
    "/{user_id}/reject-friend",
    response_model=ResponseModel[RelationChange],
    summary="拒绝好友申请",
)
async def reject_friend_request(
    request: Request,
    user_id: int,
    current_user: CurrentUser,
    service: SocialServiceDep,
) -> ResponseModel[RelationChange]:
    if not await service.reject_friend_request(user_id, current_user.id):
        raise AppException(SocialError.REQUEST_NOT_PENDING)

    req_id = getattr(request.state, "request_id", None)
    return ResponseModel.success(
        data=RelationChange(user_id=current_user.id, target_id=user_id, changed=True),
        message=SocialMsg.REQUEST_REJECTED,
        request_id=req_id,
    )


# ------------------------------------------------------------------------------
# Lists
# ------------------------------------------------------------------------------


@router.get(
    "/{user_id}/friends",
    response_model=ResponseModel[list[UserBrief]],
    summary="好友列表",
)
async def list_friends(
    request: Request,
    user_id: int,
    service: SocialServiceDep,
    user_service: UserServiceDep,
) -> ResponseModel[list[UserBrief]]:
    await user_service.get_or_404(user_id)
    friends = await service.get_friends(user_id)

    req_id = getattr(request.state, "request_id", None)
    return ResponseModel.success(
        data=[UserBrief.model_validate(u) for u in friends], request_id=req_id
    )


@router.get(
    "/{user_id}/followers",
    response_model=ResponseModel[list[UserBrief]],
    summary="粉丝列表",
)
async def list_followers(
    request: Request,
    user_id: int,
    service: SocialServiceDep,
    user_service: UserServiceDep,
) -> ResponseModel[list[UserBrief]]:
    await user_service.get_or_404(user_id)
    followers = await service.get_followers(user_id)

    req_id = getattr(request.state, "request_id", None)
    return ResponseModel.success(
        data=[UserBrief.model_validate(u) for u in followers], request_id=req_id
    )


@router.get(
    "/{user_id}/following",
    response_model=ResponseModel[list[UserBrief]],
    summary="关注列表",
)
async def list_following(
    request: Request,
    user_id: int,
    service: SocialServiceDep,
    user_service: UserServiceDep,
) -> ResponseModel[list[UserBrief]]:
    await user_service.get_or_404(user_id)
    following = await service.get_following(user_id)

    req_id = getattr(request.state, "request_id", None)
    return ResponseModel.success(
        data=[UserBrief.model_validate(u) for u in following], request_id=req_id
    )


# ------------------------------------------------------------------------------
# Follow
# ------------------------------------------------------------------------------


@router.get(
    "/{user_id}/is-following",
    response_model=ResponseModel[bool],
    summary="我是否关注了该用户",
)
async def read_is_following(
    request: Request,
    user_id: int,
    current_user: CurrentUser,
    service: SocialServiceDep,
) -> ResponseModel[bool]:
    following = await service.is_following(current_user.id, user_id)
    req_id = getattr(request.state, "request_id", None)
    return ResponseModel.success(data=following, request_id=req_id)


@router.post(
    "/{user_id}/follow",
    response_model=ResponseModel[RelationChange],
    summary="关注用户",
)
async def follow_user(
    request: Request,
    user_id: int,
    current_user: CurrentUser,
    service: SocialServiceDep,
    user_service: UserServiceDep,
) -> ResponseModel[RelationChange]:
    _reject_self(current_user.id, user_id)
    await user_service.get_or_404(user_id)

    changed = await service.follow_user(current_user.id, user_id)

    req_id = getattr(request.state, "request_id", None)
    return ResponseModel.success(
        data=RelationChange(user_id=current_user.id, target_id=user_id, changed=changed),
        message=SocialMsg.FOLLOWED,
        request_id=req_id,
    )


@router.post(
    "/{user_id}/unfollow",
    response_model=ResponseModel[RelationChange],
    summary="取消关注",
)
async def unfollow_user(
    request: Request,
    user_id: int,
    current_user: CurrentUser,
    service: SocialServiceDep,
) -> ResponseModel[RelationChange]:
    _reject_self(current_user.id, user_id)
    changed = await service.unfollow_user(current_user.id, user_id)

    req_id = getattr(request.state, "request_id", None)
    return ResponseModel.success(
        data=RelationChange(user_id=current_user.id, target_id=user_id, changed=changed),
        message=SocialMsg.UNFOLLOWED,
        request_id=req_id,
    )
