"""
File: app/domains/posts/router.py
Description: 帖子领域 HTTP 路由层

1. PATCH/DELETE /posts/{id}: 作者修改 / 删除 (不存在与非作者统一 404)
2. GET/POST /posts/{id}/comments: 评论列表 / 发表评论
3. POST /posts/{id}/like: 点赞切换；GET /posts/{id}/liked: 是否已点赞
4. GET/POST/DELETE /posts/{id}/reactions: 表情回应

Author: jinmozhe
Created: 2026-03-07
"""

from typing import Annotated

from fastapi import APIRouter, Query, Request, status

from app.api.deps import CurrentUser
from app.core.exceptions import AppException
from app.core.response import ResponseModel
from app.domains.posts.constants import PostError, PostMsg
from app.domains.posts.dependencies import PostServiceDep
from app.domains.posts.schemas import (
    CommentCreate,
    CommentRead,
    LikeState,
    PostReactions,
    PostRead,
    PostUpdate,
    ReactionCreate,
)
from app.domains.users.schemas import UserBrief

router = APIRouter()


# ------------------------------------------------------------------------------
# Post
# ------------------------------------------------------------------------------


@router.patch(
    "/{post_id}",
    response_model=ResponseModel[PostRead],
    summary="修改帖子",
    description="仅作者本人可修改正文；帖子不存在或非作者均返回 404。",
)
async def update_post(
    request: Request,
    post_id: int,
    post_in: PostUpdate,
    current_user: CurrentUser,
    service: PostServiceDep,
) -> ResponseModel[PostRead]:
    post = await service.update_post(post_id, current_user.id, post_in.content)
    if post is None:
        raise AppException(PostError.NOT_FOUND_OR_FORBIDDEN)

    req_id = getattr(request.state, "request_id", None)
    return ResponseModel.success(
        data=PostRead.model_validate(post),
        message=PostMsg.UPDATE_SUCCESS,
        request_id=req_id,
    )


@router.delete(
    "/{post_id}",
    response_model=ResponseModel[None],
    summary="删除帖子",
    description="同时删除该帖子的评论、点赞与表情回应。",
)
async def delete_post(
    request: Request,
    post_id: int,
    current_user: CurrentUser,
    service: PostServiceDep,
) -> ResponseModel[None]:
    if not await service.delete_post(post_id, current_user.id):
        raise AppException(PostError.NOT_FOUND_OR_FORBIDDEN)

    req_id = getattr(request.state, "request_id", None)
    return ResponseModel.success(
        data=None, message=PostMsg.DELETE_SUCCESS, request_id=req_id
    )


# ------------------------------------------------------------------------------
# Comment
# ------------------------------------------------------------------------------


@router.get(
    "/{post_id}/comments",
    response_model=ResponseModel[list[CommentRead]],
    summary="评论列表",
)
async def list_comments(
    request: Request,
    post_id: int,
    service: PostServiceDep,
) -> ResponseModel[list[CommentRead]]:
    await service.get_post_or_404(post_id)
    comments = await service.get_post_comments(post_id)

    req_id = getattr(request.state, "request_id", None)
    return ResponseModel.success(data=comments, request_id=req_id)


@router.post(
    "/{post_id}/comments",
    response_model=ResponseModel[CommentRead],
    status_code=status.HTTP_201_CREATED,
    summary="发表评论",
)
async def create_comment(
    request: Request,
    post_id: int,
    comment_in: CommentCreate,
    current_user: CurrentUser,
    service: PostServiceDep,
) -> ResponseModel[CommentRead]:
    await service.get_post_or_404(post_id)
    comment = await service.create_comment(current_user.id, post_id, comment_in.content)

    read = CommentRead.model_validate(comment)
    read.author = UserBrief.model_validate(current_user)

    req_id = getattr(request.state, "request_id", None)
    return ResponseModel.success(
        data=read, message=PostMsg.COMMENT_SUCCESS, request_id=req_id
    )


# ------------------------------------------------------------------------------
# Like
# ------------------------------------------------------------------------------


@router.post(
    "/{post_id}/like",
    response_model=ResponseModel[LikeState],
    summary="点赞 / 取消点赞",
    description="已点赞则取消，未点赞则点赞。返回切换后的状态与点赞数。",
)
async def toggle_like(
    request: Request,
    post_id: int,
    current_user: CurrentUser,
    service: PostServiceDep,
) -> ResponseModel[LikeState]:
    await service.get_post_or_404(post_id)
    state = await service.toggle_like(current_user.id, post_id)

    req_id = getattr(request.state, "request_id", None)
    return ResponseModel.success(
        data=state,
        message=PostMsg.LIKED if state.liked else PostMsg.UNLIKED,
        request_id=req_id,
    )


@router.get(
    "/{post_id}/liked",
    response_model=ResponseModel[bool],
    summary="当前用户是否已点赞",
)
async def read_liked(
    request: Request,
    post_id: int,
    current_user: CurrentUser,
    service: PostServiceDep,
) -> ResponseModel[bool]:
    liked = await service.is_post_liked_by_user(current_user.id, post_id)
    req_id = getattr(request.state, "request_id", None)
    return ResponseModel.success(data=liked, request_id=req_id)


# ------------------------------------------------------------------------------
# Reaction
# ------------------------------------------------------------------------------


@router.get(
    "/{post_id}/reactions",
    response_model=ResponseModel[PostReactions],
    summary="表情回应列表",
)
async def list_reactions(
    request: Request,
    post_id: int,
    service: PostServiceDep,
) -> ResponseModel[PostReactions]:
    await service.get_post_or_404(post_id)
    reactions = await service.get_post_reactions(post_id)

    req_id = getattr(request.state, "request_id", None)
    return ResponseModel.success(data=reactions, request_id=req_id)


@router.post(
    "/{post_id}/reactions",
    response_model=ResponseModel[PostReactions],
    status_code=status.HTTP_201_CREATED,
    summary="添加表情回应",
    description="幂等：同一用户对同一帖子的同一表情只记录一次。",
)
async def add_reaction(
    request: Request,
    post_id: int,
    reaction_in: ReactionCreate,
    current_user: CurrentUser,
    service: PostServiceDep,
) -> ResponseModel[PostReactions]:
    await service.get_post_or_404(post_id)
    await service.add_reaction(current_user.id, post_id, reaction_in.emoji)
    reactions = await service.get_post_reactions(post_id)

    req_id = getattr(request.state, "request_id", None)
    return ResponseModel.success(
        data=reactions, message=PostMsg.REACTION_ADDED, request_id=req_id
    )


@router.delete(
    "/{post_id}/reactions",
    response_model=ResponseModel[PostReactions],
    summary="移除表情回应",
)
async def remove_reaction(
    request: Request,
    post_id: int,
    emoji: Annotated[str, Query(min_length=1, max_length=32)],
    current_user: CurrentUser,
    service: PostServiceDep,
) -> ResponseModel[PostReactions]:
    await service.get_post_or_404(post_id)
    await service.remove_reaction(current_user.id, post_id, emoji)
    reactions = await service.get_post_reactions(post_id)

    req_id = getattr(request.state, "request_id", None)
    return ResponseModel.success(
        data=reactions, message=PostMsg.REACTION_REMOVED, request_id=req_id
    )
