"""
File: app/domains/groups/router.py
Description: 小组领域 HTTP 路由层

本模块定义小组相关的 API 端点：
1. GET/POST /groups: 小组列表 / 创建 (管理员)
2. GET /groups/{id}: 小组详情 (帖子 + 成员 + 聊天)
3. GET/POST /groups/{id}/posts: 帖子列表 / 发帖 (需为成员)
4. POST /groups/{id}/join|leave: 加入 / 退出
5. GET/POST /groups/{id}/members, DELETE /groups/{id}/members/{user_id}
6. GET/POST /groups/{id}/chat: 聊天记录 / 发送消息 (需为成员)

Author: jinmozhe
Created: 2026-03-07
"""

from fastapi import APIRouter, Request, status

from app.api.deps import AdminUser, CurrentUser
from app.core.exceptions import AppException
from app.core.response import ResponseModel
from app.db.models.group import DEFAULT_MEMBER_ROLE
from app.domains.groups.constants import GroupError, GroupMsg
from app.domains.groups.dependencies import GroupServiceDep
from app.domains.groups.schemas import (
    ChatMessageCreate,
    ChatMessageRead,
    GroupCreate,
    GroupDetail,
    GroupMemberCreate,
    GroupMemberRead,
    GroupRead,
    MembershipChange,
)
from app.domains.posts.constants import PostMsg
from app.domains.posts.dependencies import PostServiceDep
from app.domains.posts.schemas import PostCreate, PostRead
from app.domains.users.dependencies import UserServiceDep
from app.domains.users.schemas import UserBrief

router = APIRouter()


# ------------------------------------------------------------------------------
# Group
# ------------------------------------------------------------------------------


@router.get(
    "",
    response_model=ResponseModel[list[GroupRead]],
    summary="小组列表",
)
async def list_groups(
    request: Request,
    service: GroupServiceDep,
) -> ResponseModel[list[GroupRead]]:
    groups = await service.get_groups()
    req_id = getattr(request.state, "request_id", None)
    return ResponseModel.success(
        data=[GroupRead.model_validate(g) for g in groups], request_id=req_id
    )


@router.post(
    "",
    response_model=ResponseModel[GroupRead],
    status_code=status.HTTP_201_CREATED,
    summary="创建小组 (管理员)",
)
async def create_group(
    request: Request,
    group_in: GroupCreate,
    admin: AdminUser,
    service: GroupServiceDep,
) -> ResponseModel[GroupRead]:
    group = await service.create_group(group_in)
    req_id = getattr(request.state, "request_id", None)
    return ResponseModel.success(
        data=GroupRead.model_validate(group),
        message=GroupMsg.CREATE_SUCCESS,
        request_id=req_id,
    )


@router.get(
    "/{group_id}",
    response_model=ResponseModel[GroupDetail],
    summary="小组详情",
    description="小组信息 + 帖子 (最新在前) + 成员 (按加入时间) + 聊天记录 (最早在前)。",
)
async def read_group(
    request: Request,
    group_id: int,
    service: GroupServiceDep,
) -> ResponseModel[GroupDetail]:
    detail = await service.get_group_detail(group_id)
    if detail is None:
        raise AppException(GroupError.GROUP_NOT_FOUND)

    req_id = getattr(request.state, "request_id", None)
    return ResponseModel.success(data=detail, request_id=req_id)


# ------------------------------------------------------------------------------
# Posts
# ------------------------------------------------------------------------------


@router.get(
    "/{group_id}/posts",
    response_model=ResponseModel[list[PostRead]],
    summary="小组帖子列表",
)
async def list_group_posts(
    request: Request,
    group_id: int,
    service: GroupServiceDep,
    post_service: PostServiceDep,
) -> ResponseModel[list[PostRead]]:
    await service.get_group_or_404(group_id)
    posts = await post_service.get_group_posts(group_id)

    req_id = getattr(request.state, "request_id", None)
    return ResponseModel.success(
        data=[PostRead.model_validate(p) for p in posts], request_id=req_id
    )


@router.post(
    "/{group_id}/posts",
    response_model=ResponseModel[PostRead],
    status_code=status.HTTP_201_CREATED,
    summary="发帖",
    description="在小组内发帖，需先加入小组。",
)
async def create_group_post(
    request: Request,
    group_id: int,
    post_in: PostCreate,
    current_user: CurrentUser,
    service: GroupServiceDep,
    post_service: PostServiceDep,
) -> ResponseModel[PostRead]:
    await service.get_group_or_404(group_id)
    await service.ensure_member(current_user.id, group_id)

    post = await post_service.create_post(current_user.id, group_id, post_in)

    req_id = getattr(request.state, "request_id", None)
    return ResponseModel.success(
        data=PostRead.model_validate(post),
        message=PostMsg.CREATE_SUCCESS,
        request_id=req_id,
    )


# ------------------------------------------------------------------------------
# Membership
# ------------------------------------------------------------------------------


@router.post(
    "/{group_id}/join",
    response_model=ResponseModel[MembershipChange],
    summary="加入小组",
    description="幂等：已是成员时 changed=false。",
)
async def join_group(
    request: Request,
    group_id: int,
    current_user: CurrentUser,
    service: GroupServiceDep,
) -> ResponseModel[MembershipChange]:
    await service.get_group_or_404(group_id)
    changed = await service.join_group(current_user.id, group_id)

    req_id = getattr(request.state, "request_id", None)
    return ResponseModel.success(
        data=MembershipChange(
            group_id=group_id, user_id=current_user.id, is_member=True, changed=changed
        ),
        message=GroupMsg.JOIN_SUCCESS,
        request_id=req_id,
    )


@router.post(
    "/{group_id}/leave",
    response_model=ResponseModel[MembershipChange],
    summary="退出小组",
)
async def leave_group(
    request: Request,
    group_id: int,
    current_user: CurrentUser,
    service: GroupServiceDep,
) -> ResponseModel[MembershipChange]:
    await service.get_group_or_404(group_id)
    changed = await service.leave_group(current_user.id, group_id)

    req_id = getattr(request.state, "request_id", None)
    return ResponseModel.success(
        data=MembershipChange(
            group_id=group_id, user_id=current_user.id, is_member=False, changed=changed
        ),
        message=GroupMsg.LEAVE_SUCCESS,
        request_id=req_id,
    )


@router.get(
    "/{group_id}/members",
    response_model=ResponseModel[list[GroupMemberRead]],
    summary="成员列表",
)
async def list_group_members(
    request: Request,
    group_id: int,
    service: GroupServiceDep,
) -> ResponseModel[list[GroupMemberRead]]:
    await service.get_group_or_404(group_id)
    members = await service.get_group_members(group_id)

    req_id = getattr(request.state, "request_id", None)
    return ResponseModel.success(data=members, request_id=req_id)


@router.post(
    "/{group_id}/members",
    response_model=ResponseModel[MembershipChange],
    summary="添加成员",
    description="管理员或小组成员可添加成员；指定非 member 角色仅限管理员。",
)
async def add_group_member(
    request: Request,
    group_id: int,
    member_in: GroupMemberCreate,
    current_user: CurrentUser,
    service: GroupServiceDep,
    user_service: UserServiceDep,
) -> ResponseModel[MembershipChange]:
    await service.get_group_or_404(group_id)

    if not current_user.is_admin:
        await service.ensure_member(current_user.id, group_id)
        if member_in.role != DEFAULT_MEMBER_ROLE:
            raise AppException(GroupError.MEMBER_FORBIDDEN, message="仅管理员可指定角色")

    await user_service.get_or_404(member_in.user_id)
    changed = await service.add_group_member(member_in.user_id, group_id, member_in.role)

    req_id = getattr(request.state, "request_id", None)
    return ResponseModel.success(
        data=MembershipChange(
            group_id=group_id, user_id=member_in.user_id, is_member=True, changed=changed
        ),
        message=GroupMsg.MEMBER_ADDED,
        request_id=req_id,
    )


@router.delete(
    "/{group_id}/members/{user_id}",
    response_model=ResponseModel[MembershipChange],
    summary="移除成员",
    description="只能移除自己，管理员可移除任何人。",
)
async def remove_group_member(
    request: Request,
    group_id: int,
    user_id: int,
    current_user: CurrentUser,
    service: GroupServiceDep,
) -> ResponseModel[MembershipChange]:
    if user_id != current_user.id and not current_user.is_admin:
        raise AppException(GroupError.MEMBER_FORBIDDEN)

    await service.get_group_or_404(group_id)
    changed = await service.remove_group_member(user_id, group_id)

    req_id = getattr(request.state, "request_id", None)
    return ResponseModel.success(
        data=MembershipChange(
            group_id=group_id, user_id=user_id, is_member=False, changed=changed
        ),
        message=GroupMsg.MEMBER_REMOVED,
        request_id=req_id,
    )


# ------------------------------------------------------------------------------
# Chat
# ------------------------------------------------------------------------------


@router.get(
    "/{group_id}/chat",
    response_model=ResponseModel[list[ChatMessageRead]],
    summary="小组聊天记录",
)
async def list_group_chat(
    request: Request,
    group_id: int,
    service: GroupServiceDep,
) -> ResponseModel[list[ChatMessageRead]]:
    await service.get_group_or_404(group_id)
    messages = await service.get_group_chat(group_id)

    req_id = getattr(request.state, "request_id", None)
    return ResponseModel.success(data=messages, request_id=req_id)


@router.post(
    "/{group_id}/chat",
    response_model=ResponseModel[ChatMessageRead],
    status_code=status.HTTP_201_CREATED,
    summary="发送聊天消息",
    description="需先加入小组。",
)
async def create_chat_message(
    request: Request,
    group_id: int,
    message_in: ChatMessageCreate,
    current_user: CurrentUser,
    service: GroupServiceDep,
) -> ResponseModel[ChatMessageRead]:
    await service.get_group_or_404(group_id)
    await service.ensure_member(current_user.id, group_id)

    chat = await service.create_chat_message(
        current_user.id, group_id, message_in.message
    )

    read = ChatMessageRead.model_validate(chat)
    read.user = UserBrief.model_validate(current_user)

    req_id = getattr(request.state, "request_id", None)
    return ResponseModel.success(
        data=read, message=GroupMsg.MESSAGE_SENT, request_id=req_id
    )
