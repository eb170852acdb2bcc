"""
File: app/domains/posts/repository.py
Description: 帖子领域仓储层 (Repository)

覆盖帖子、评论、点赞、表情回应四张表。

点赞计数器约定：
- insert_like / delete_like 返回"是否真的插入/删除了一行"
- 只有返回 True 时 Service 才调用 adjust_like_count，且在同一事务内
- 计数用 like_count = like_count ± 1 的 SQL 表达式更新，不在内存里读改写

本层只 flush 不 commit。

Author: jinmozhe
Created: 2026-03-07
"""

from sqlalchemy import delete, func, select, update

from app.db.models.group import GroupMember
from app.db.models.post import Comment, Like, Post, Reaction
from app.db.models.user import User
from app.db.repositories.base import BaseRepository
from app.domains.posts.schemas import PostCreate, PostUpdate


class PostRepository(BaseRepository[Post, PostCreate, PostUpdate]):
    # --------------------------------------------------------------------------
    # Post
    # --------------------------------------------------------------------------

    async def get_owned(self, post_id: int, user_id: int) -> Post | None:
        """帖子存在且属于 user_id 时返回，否则 None"""
        stmt = select(Post).where(Post.id == post_id, Post.user_id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_group_posts(self, group_id: int) -> list[Post]:
        stmt = (
            select(Post)
            .where(Post.group_id == group_id)
            .order_by(Post.created_at.desc(), Post.id.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_user_posts(self, user_id: int) -> list[Post]:
        stmt = (
            select(Post)
            .where(Post.user_id == user_id)
            .order_by(Post.created_at.desc(), Post.id.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_user_group_posts(
        self, user_id: int, *, limit: int, offset: int = 0
    ) -> list[Post]:
        """
        用户所在全部小组的帖子 (最新在前)。
        小组集合以子查询形式交给数据库，不在应用侧拼 IN 列表。
        """
        member_groups = select(GroupMember.group_id).where(
            GroupMember.user_id == user_id
        )
        stmt = (
            select(Post)
            .where(Post.group_id.in_(member_groups))
            .order_by(Post.created_at.desc(), Post.id.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def delete_with_children(self, post: Post) -> None:
        """同一事务内先删评论、点赞、表情，再删帖子"""
        for child in (Comment, Like, Reaction):
            await self.session.execute(
                delete(child)
                .where(child.post_id == post.id)
                .execution_options(synchronize_session=False)
            )
        await self.session.delete(post)
        await self.session.flush()

    # --------------------------------------------------------------------------
    # Like
    # --------------------------------------------------------------------------

    async def insert_like(self, user_id: int, post_id: int) -> bool:
        return await self.insert_ignore(
            Like,
            {"user_id": user_id, "post_id": post_id},
            conflict_columns=("user_id", "post_id"),
        )

    async def delete_like(self, user_id: int, post_id: int) -> bool:
        stmt = (
            delete(Like)
            .where(Like.user_id == user_id, Like.post_id == post_id)
            .returning(Like.user_id)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.first() is not None

    async def adjust_like_count(self, post_id: int, delta: int) -> None:
        stmt = (
            update(Post)
            .where(Post.id == post_id)
            .values(like_count=Post.like_count + delta)
        )
        await self.session.execute(stmt)

    async def get_like_count(self, post_id: int) -> int | None:
        stmt = select(Post.like_count).where(Post.id == post_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def is_liked(self, user_id: int, post_id: int) -> bool:
        stmt = select(Like.user_id).where(
            Like.user_id == user_id, Like.post_id == post_id
        )
        result = await self.session.execute(stmt)
        return result.first() is not None

    # --------------------------------------------------------------------------
    # Comment
    # --------------------------------------------------------------------------

    async def get_comments_with_authors(
        self, post_id: int
    ) -> list[tuple[Comment, User | None]]:
        stmt = (
            select(Comment, User)
            .outerjoin(User, User.id == Comment.user_id)
            .where(Comment.post_id == post_id)
            .order_by(Comment.created_at.asc(), Comment.id.asc())
        )
        result = await self.session.execute(stmt)
        return [(comment, user) for comment, user in result.all()]

    async def create_comment(self, user_id: int, post_id: int, content: str) -> Comment:
        comment = Comment(user_id=user_id, post_id=post_id, content=content)
        self.session.add(comment)
        await self.session.flush()
        await self.session.refresh(comment)
        return comment

    # --------------------------------------------------------------------------
    # Reaction
    # --------------------------------------------------------------------------

    async def get_reactions(self, post_id: int) -> list[Reaction]:
        stmt = (
            select(Reaction)
            .where(Reaction.post_id == post_id)
            .order_by(Reaction.created_at.asc(), Reaction.id.asc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_reaction_summary(self, post_id: int) -> list[tuple[str, int]]:
        stmt = (
            select(Reaction.emoji, func.count())
            .where(Reaction.post_id == post_id)
            .group_by(Reaction.emoji)
            .order_by(func.count().desc(), Reaction.emoji)
        )
        result = await self.session.execute(stmt)
        return [(emoji, count) for emoji, count in result.all()]

    async def insert_reaction(self, user_id: int, post_id: int, emoji: str) -> bool:
        return await self.insert_ignore(
            Reaction,
            {"user_id": user_id, "post_id": post_id, "emoji": emoji},
            conflict_columns=("post_id", "user_id", "emoji"),
        )

    async def delete_reaction(self, user_id: int, post_id: int, emoji: str) -> bool:
        stmt = (
            delete(Reaction)
            .where(
                Reaction.user_id == user_id,
                Reaction.post_id == post_id,
                Reaction.emoji == emoji,
            )
            .returning(Reaction.id)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.first() is not None
