"""
File: app/domains/posts/service.py
Description: 帖子领域服务 (业务逻辑层)

本模块封装帖子、评论、点赞、表情回应的业务逻辑：
1. 发帖：按 post_type 把 media_url 落到对应的媒体列
2. 修改 / 删除：仅作者本人；不存在与非作者返回同一信号 (None / False)
3. 点赞：插入成功才 +1，删除成功才 -1，与计数器更新在同一事务内提交
4. 评论与表情回应

事务：每个写方法结束时 commit；异常时由调用链上的 Session 关闭回滚。

Author: jinmozhe
Created: 2026-03-07
"""

from app.core.exceptions import AppException
from app.core.logging import logger
from app.db.models.post import Comment, Post, PostType
from app.domains.posts.constants import PostError
from app.domains.posts.repository import PostRepository
from app.domains.posts.schemas import (
    CommentRead,
    LikeState,
    PostCreate,
    PostReactions,
    ReactionRead,
    ReactionSummary,
)
from app.domains.users.schemas import UserBrief

# post_type -> 媒体列
MEDIA_COLUMNS: dict[PostType, str] = {
    PostType.IMAGE: "image_url",
    PostType.VIDEO: "video_url",
    PostType.MUSIC: "music_url",
}


class PostService:
    def __init__(self, repo: PostRepository):
        self.repo = repo

    # --------------------------------------------------------------------------
    # Post
    # --------------------------------------------------------------------------

    async def get_post(self, post_id: int) -> Post | None:
        return await self.repo.get(post_id)

    async def get_post_or_404(self, post_id: int) -> Post:
        post = await self.repo.get(post_id)
        if post is None:
            raise AppException(PostError.POST_NOT_FOUND)
        return post

    async def create_post(self, user_id: int, group_id: int, obj_in: PostCreate) -> Post:
        """
        创建帖子，like_count 从 0 开始。
        小组存在性与成员资格由路由层校验。
        """
        data: dict = {
            "content": obj_in.content,
            "user_id": user_id,
            "group_id": group_id,
            "post_type": obj_in.post_type.value,
            "like_count": 0,
        }
        media_column = MEDIA_COLUMNS.get(obj_in.post_type)
        if media_column:
            data[media_column] = obj_in.media_url

        post = await self.repo.create(data)
        await self.repo.session.commit()

        logger.bind(post_id=post.id, group_id=group_id, user_id=user_id).info(
            "Post created"
        )
        return post

    async def get_group_posts(self, group_id: int) -> list[Post]:
        return await self.repo.get_group_posts(group_id)

    async def get_user_posts(self, user_id: int) -> list[Post]:
        return await self.repo.get_user_posts(user_id)

    async def get_user_group_posts(
        self, user_id: int, *, limit: int, offset: int = 0
    ) -> list[Post]:
        return await self.repo.get_user_group_posts(user_id, limit=limit, offset=offset)

    async def update_post(self, post_id: int, user_id: int, content: str) -> Post | None:
        """
        修改正文。帖子不存在或不属于 user_id 时返回 None。
        """
        post = await self.repo.get_owned(post_id, user_id)
        if post is None:
            return None

        updated = await self.repo.update(post, {"content": content})
        await self.repo.session.commit()

        logger.bind(post_id=post_id, user_id=user_id).info("Post updated")
        return updated

    async def delete_post(self, post_id: int, user_id: int) -> bool:
        """
        删除帖子及其评论、点赞、表情 (一个事务)。
        不存在或非作者返回 False，不抛异常。
        """
        post = await self.repo.get_owned(post_id, user_id)
        if post is None:
            return False

        await self.repo.delete_with_children(post)
        await self.repo.session.commit()

        logger.bind(post_id=post_id, user_id=user_id).info("Post deleted")
        return True

    # --------------------------------------------------------------------------
    # Like
    # --------------------------------------------------------------------------

    async def like_post(self, user_id: int, post_id: int) -> bool:
        """
        点赞。返回本次是否新增了点赞；重复点赞不改变计数。
        """
        inserted = await self.repo.insert_like(user_id, post_id)
        if inserted:
            await self.repo.adjust_like_count(post_id, 1)
        await self.repo.session.commit()
        return inserted

    async def unlike_post(self, user_id: int, post_id: int) -> bool:
        """
        取消点赞。返回本次是否删除了点赞；未点赞时不改变计数。
        """
        deleted = await self.repo.delete_like(user_id, post_id)
        if deleted:
            await self.repo.adjust_like_count(post_id, -1)
        await self.repo.session.commit()
        return deleted

    async def toggle_like(self, user_id: int, post_id: int) -> LikeState:
        if await self.repo.is_liked(user_id, post_id):
            await self.unlike_post(user_id, post_id)
            liked = False
        else:
            await self.like_post(user_id, post_id)
            liked = True

        like_count = await self.repo.get_like_count(post_id) or 0
        return LikeState(post_id=post_id, liked=liked, like_count=like_count)

    async def is_post_liked_by_user(self, user_id: int, post_id: int) -> bool:
        return await self.repo.is_liked(user_id, post_id)

    # --------------------------------------------------------------------------
    # Comment
    # --------------------------------------------------------------------------

    async def get_post_comments(self, post_id: int) -> list[CommentRead]:
        rows = await self.repo.get_comments_with_authors(post_id)
        return [self._comment_read(comment, author) for comment, author in rows]

    async def create_comment(self, user_id: int, post_id: int, content: str) -> Comment:
        comment = await self.repo.create_comment(user_id, post_id, content)
        await self.repo.session.commit()
        return comment

    @staticmethod
    def _comment_read(comment: Comment, author) -> CommentRead:
        read = CommentRead.model_validate(comment)
        if author is not None:
            read.author = UserBrief.model_validate(author)
        return read

    # --------------------------------------------------------------------------
    # Reaction
    # --------------------------------------------------------------------------

    async def get_post_reactions(self, post_id: int) -> PostReactions:
        reactions = await self.repo.get_reactions(post_id)
        summary = await self.repo.get_reaction_summary(post_id)
        return PostReactions(
            reactions=[ReactionRead.model_validate(r) for r in reactions],
            summary=[ReactionSummary(emoji=e, count=c) for e, c in summary],
        )

    async def add_reaction(self, user_id: int, post_id: int, emoji: str) -> bool:
        added = await self.repo.insert_reaction(user_id, post_id, emoji)
        await self.repo.session.commit()
        return added

    async def remove_reaction(self, user_id: int, post_id: int, emoji: str) -> bool:
        removed = await self.repo.delete_reaction(user_id, post_id, emoji)
        await self.repo.session.commit()
        return removed
