"""
File: tests/unit/test_post_service.py
Description: PostService 单元测试

1. 发帖：媒体列映射、like_count 初始为 0
2. 发帖参数校验：media_url 与 post_type 的组合
3. 点赞：幂等 (含并发)、计数器与点赞行保持一致、toggle
4. 修改 / 删除：仅作者；删除连带评论、点赞、表情
5. 评论与表情回应

Author: jinmozhe
Created: 2026-03-10
"""

import asyncio

import pytest
import pytest_asyncio
from pydantic import ValidationError
from sqlalchemy import func, select

from app.db.models import Comment, Like, Post, PostType, Reaction
from app.domains.posts.repository import PostRepository
from app.domains.posts.schemas import PostCreate
from app.domains.posts.service import PostService


@pytest.fixture
def post_service(db_session) -> PostService:
    return PostService(PostRepository(model=Post, session=db_session))


@pytest_asyncio.fixture
async def author_and_group(make_user, make_group):
    author = await make_user("alice")
    group = await make_group("Tech")
    return author, group


# ------------------------------------------------------------------------------
# Create / Validation
# ------------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_create_text_post(post_service, author_and_group) -> None:
    author, group = author_and_group

    post = await post_service.create_post(
        author.id, group.id, PostCreate(content="hello world")
    )

    assert post.id is not None
    assert post.post_type == PostType.TEXT
    assert post.like_count == 0
    assert post.image_url is None and post.video_url is None and post.music_url is None

    fetched = await post_service.get_post(post.id)
    assert fetched is not None
    assert fetched.content == "hello world"


@pytest.mark.asyncio
async def test_create_media_posts_fill_matching_column(
    post_service, author_and_group
) -> None:
    author, group = author_and_group

    image = await post_service.create_post(
        author.id,
        group.id,
        PostCreate(
            content="pic", post_type=PostType.IMAGE, media_url="https://cdn.test/a.png"
        ),
    )
    video = await post_service.create_post(
        author.id,
        group.id,
        PostCreate(
            content="clip",
            post_type=PostType.VIDEO,
            media_url="https://www.youtube.com/watch?v=dQw4w9WgXcQ",
        ),
    )
    music = await post_service.create_post(
        author.id,
        group.id,
        PostCreate(
            content="song", post_type=PostType.MUSIC, media_url="/uploads/music/a.mp3"
        ),
    )

    assert image.image_url == "https://cdn.test/a.png"
    assert video.video_url == "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
    assert music.music_url == "/uploads/music/a.mp3"
    assert image.video_url is None and video.image_url is None


@pytest.mark.parametrize(
    "payload",
    [
        {"content": "   "},
        {"content": "text", "media_url": "https://cdn.test/a.png"},
        {"content": "img", "post_type": "image"},
        {"content": "vid", "post_type": "video", "media_url": "https://vimeo.com/1"},
        {"content": "img", "post_type": "image", "media_url": "ftp://x/a.png"},
        {"content": "bad", "post_type": "poll"},
    ],
)
def test_post_create_rejects_invalid_payload(payload) -> None:
    with pytest.raises(ValidationError):
        PostCreate.model_validate(payload)


@pytest.mark.asyncio
async def test_group_posts_newest_first(post_service, author_and_group) -> None:
    author, group = author_and_group
    first = await post_service.create_post(author.id, group.id, PostCreate(content="1"))
    second = await post_service.create_post(author.id, group.id, PostCreate(content="2"))

    posts = await post_service.get_group_posts(group.id)

    assert [p.id for p in posts] == [second.id, first.id]


# ------------------------------------------------------------------------------
# Like
# ------------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_like_is_idempotent(post_service, author_and_group, make_user) -> None:
    author, group = author_and_group
    fan = await make_user("bob")
    post = await post_service.create_post(author.id, group.id, PostCreate(content="x"))

    assert await post_service.like_post(fan.id, post.id) is True
    assert await post_service.like_post(fan.id, post.id) is False

    assert await post_service.repo.get_like_count(post.id) == 1
    assert await post_service.is_post_liked_by_user(fan.id, post.id) is True


@pytest.mark.asyncio
async def test_unlike_without_like_keeps_counter(
    post_service, author_and_group, make_user
) -> None:
    author, group = author_and_group
    fan = await make_user("bob")
    post = await post_service.create_post(author.id, group.id, PostCreate(content="x"))

    assert await post_service.unlike_post(fan.id, post.id) is False
    assert await post_service.repo.get_like_count(post.id) == 0

    await post_service.like_post(fan.id, post.id)
    assert await post_service.unlike_post(fan.id, post.id) is True
    assert await post_service.unlike_post(fan.id, post.id) is False
    assert await post_service.repo.get_like_count(post.id) == 0


@pytest.mark.asyncio
async def test_like_count_matches_like_rows(
    post_service, author_and_group, make_user, db_session
) -> None:
    author, group = author_and_group
    fans = [await make_user(f"fan{i}") for i in range(3)]
    post = await post_service.create_post(author.id, group.id, PostCreate(content="x"))

    for fan in fans:
        await post_service.like_post(fan.id, post.id)
    await post_service.unlike_post(fans[0].id, post.id)

    rows = await db_session.scalar(
        select(func.count()).select_from(Like).where(Like.post_id == post.id)
    )
    assert rows == 2
    assert await post_service.repo.get_like_count(post.id) == 2


@pytest.mark.asyncio
async def test_toggle_like(post_service, author_and_group) -> None:
    author, group = author_and_group
    post = await post_service.create_post(author.id, group.id, PostCreate(content="x"))

    on = await post_service.toggle_like(author.id, post.id)
    off = await post_service.toggle_like(author.id, post.id)

    assert (on.liked, on.like_count) == (True, 1)
    assert (off.liked, off.like_count) == (False, 0)


@pytest.mark.asyncio
async def test_concurrent_likes_count_once(
    post_service, author_and_group, make_user, session_factory
) -> None:
    author, group = author_and_group
    fan = await make_user("bob")
    post = await post_service.create_post(author.id, group.id, PostCreate(content="x"))

    async def like_once() -> bool:
        async with session_factory() as session:
            service = PostService(PostRepository(model=Post, session=session))
            return await service.like_post(fan.id, post.id)

    results = await asyncio.gather(*(like_once() for _ in range(5)))

    assert sorted(results) == [False, False, False, False, True]
    async with session_factory() as session:
        count = await PostRepository(model=Post, session=session).get_like_count(post.id)
        rows = await session.scalar(
            select(func.count()).select_from(Like).where(Like.post_id == post.id)
        )
    assert (count, rows) == (1, 1)


# ------------------------------------------------------------------------------
# Update / Delete
# ------------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_update_post_only_by_author(
    post_service, author_and_group, make_user, session_factory
) -> None:
    author, group = author_and_group
    other = await make_user("mallory")
    post = await post_service.create_post(author.id, group.id, PostCreate(content="v1"))

    assert await post_service.update_post(post.id, other.id, "hacked") is None
    assert await post_service.update_post(999, author.id, "ghost") is None

    async with session_factory() as fresh:
        stored = await fresh.get(Post, post.id)
    assert stored.content == "v1"

    updated = await post_service.update_post(post.id, author.id, "v2")
    assert updated is not None
    assert updated.content == "v2"


@pytest.mark.asyncio
async def test_delete_post_removes_children(
    post_service, author_and_group, make_user, db_session
) -> None:
    author, group = author_and_group
    fan = await make_user("bob")
    post = await post_service.create_post(author.id, group.id, PostCreate(content="x"))
    await post_service.like_post(fan.id, post.id)
    await post_service.create_comment(fan.id, post.id, "nice")
    await post_service.add_reaction(fan.id, post.id, "🔥")

    assert await post_service.delete_post(post.id, fan.id) is False
    assert await post_service.delete_post(post.id, author.id) is True
    assert await post_service.delete_post(post.id, author.id) is False

    assert await post_service.get_post(post.id) is None
    for model in (Like, Comment, Reaction):
        remaining = await db_session.scalar(
            select(func.count()).select_from(model).where(model.post_id == post.id)
        )
        assert remaining == 0


# ------------------------------------------------------------------------------
# Comment / Reaction
# ------------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_comments_oldest_first_with_author(
    post_service, author_and_group, make_user
) -> None:
    author, group = author_and_group
    fan = await make_user("bob")
    post = await post_service.create_post(author.id, group.id, PostCreate(content="x"))

    await post_service.create_comment(fan.id, post.id, "first")
    await post_service.create_comment(author.id, post.id, "second")

    comments = await post_service.get_post_comments(post.id)

    assert [c.content for c in comments] == ["first", "second"]
    assert comments[0].author is not None
    assert comments[0].author.username == "bob"


@pytest.mark.asyncio
async def test_reactions_summary(post_service, author_and_group, make_user) -> None:
    author, group = author_and_group
    fan = await make_user("bob")
    post = await post_service.create_post(author.id, group.id, PostCreate(content="x"))

    assert await post_service.add_reaction(fan.id, post.id, "🔥") is True
    assert await post_service.add_reaction(fan.id, post.id, "🔥") is False
    assert await post_service.add_reaction(author.id, post.id, "🔥") is True
    assert await post_service.add_reaction(author.id, post.id, "😂") is True

    reactions = await post_service.get_post_reactions(post.id)

    assert len(reactions.reactions) == 3
    assert [(s.emoji, s.count) for s in reactions.summary] == [("🔥", 2), ("😂", 1)]

    assert await post_service.remove_reaction(author.id, post.id, "😂") is True
    assert await post_service.remove_reaction(author.id, post.id, "😂") is False
