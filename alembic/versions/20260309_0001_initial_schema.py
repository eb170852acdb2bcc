"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-03-09 10:00:00.000000

"""
from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        server_default=sa.func.now(),
        nullable=False,
        comment="创建时间 (UTC)",
    )


def _updated_at() -> sa.Column:
    return sa.Column(
        "updated_at",
        sa.DateTime(timezone=True),
        server_default=sa.func.now(),
        nullable=False,
        comment="更新时间 (UTC)",
    )


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False, comment="主键 (自增)"),
        sa.Column("username", sa.String(length=50), nullable=False, comment="用户名 (登录凭证, 唯一)"),
        sa.Column("password", sa.String(length=255), nullable=False, comment="密码哈希 (Argon2id)"),
        sa.Column("display_name", sa.String(length=100), nullable=False, comment="展示昵称"),
        sa.Column("is_admin", sa.Boolean(), server_default=sa.text("false"), nullable=False, comment="是否管理员"),
        sa.Column("bio", sa.Text(), nullable=True, comment="个人简介"),
        sa.Column("avatar_url", sa.String(length=500), nullable=True, comment="头像 URL"),
        sa.Column("cover_url", sa.String(length=500), nullable=True, comment="封面 URL"),
        sa.Column("location", sa.String(length=100), nullable=True),
        sa.Column("interests", sa.Text(), nullable=True),
        sa.Column("occupation", sa.String(length=100), nullable=True),
        sa.Column("relationship_status", sa.String(length=50), nullable=True),
        sa.Column("favorite_quote", sa.Text(), nullable=True),
        sa.Column("social_links", sa.JSON(), nullable=True, comment="社交链接 {platform: url}"),
        sa.Column("theme", sa.String(length=20), server_default=sa.text("'light'"), nullable=False, comment="主题"),
        sa.Column("profile_layout", sa.String(length=20), server_default=sa.text("'classic'"), nullable=False, comment="主页布局"),
        sa.Column("custom_css", sa.Text(), nullable=True),
        sa.Column("background_color", sa.String(length=20), nullable=True),
        sa.Column("text_color", sa.String(length=20), nullable=True),
        sa.Column("accent_color", sa.String(length=20), nullable=True),
        sa.Column("font_family", sa.String(length=100), nullable=True),
        _created_at(),
        _updated_at(),
        sa.CheckConstraint("length(trim(username)) > 0", name=op.f("ck_users_username_not_empty")),
        sa.CheckConstraint("length(password) > 0", name=op.f("ck_users_password_not_empty")),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_users")),
        sa.UniqueConstraint("username", name=op.f("uq_users_username")),
    )

    op.create_table(
        "groups",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False, comment="主键 (自增)"),
        sa.Column("name", sa.String(length=100), nullable=False, comment="名称"),
        sa.Column("description", sa.Text(), nullable=False, comment="简介"),
        sa.Column("category", sa.String(length=50), nullable=False, comment="分类"),
        sa.Column("icon_url", sa.String(length=500), nullable=True),
        sa.Column("cover_url", sa.String(length=500), nullable=True),
        sa.Column("is_private", sa.Boolean(), server_default=sa.text("false"), nullable=False, comment="是否私密"),
        _created_at(),
        _updated_at(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_groups")),
    )
    op.create_index(op.f("ix_groups_groups_category"), "groups", ["category"], unique=False)

    op.create_table(
        "group_members",
        sa.Column("group_id", sa.Integer(), nullable=False, comment="小组ID"),
        sa.Column("user_id", sa.Integer(), nullable=False, comment="用户ID"),
        sa.Column("role", sa.String(length=20), server_default=sa.text("'member'"), nullable=False, comment="角色 (member / moderator / owner)"),
        sa.Column("joined_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False, comment="加入时间 (UTC)"),
        sa.ForeignKeyConstraint(["group_id"], ["groups.id"], name=op.f("fk_group_members_group_id_groups")),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], name=op.f("fk_group_members_user_id_users")),
        sa.PrimaryKeyConstraint("group_id", "user_id", name=op.f("pk_group_members")),
    )
    op.create_index("ix_group_members_user_id", "group_members", ["user_id"], unique=False)

    op.create_table(
        "group_chat",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False, comment="主键 (自增)"),
        sa.Column("group_id", sa.Integer(), nullable=False, comment="小组ID"),
        sa.Column("user_id", sa.Integer(), nullable=False, comment="发送者ID"),
        sa.Column("message", sa.Text(), nullable=False, comment="消息内容"),
        _created_at(),
        sa.ForeignKeyConstraint(["group_id"], ["groups.id"], name=op.f("fk_group_chat_group_id_groups")),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], name=op.f("fk_group_chat_user_id_users")),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_group_chat")),
    )
    op.create_index("ix_group_chat_group_id_created_at", "group_chat", ["group_id", "created_at"], unique=False)

    op.create_table(
        "posts",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False, comment="主键 (自增)"),
        sa.Column("content", sa.Text(), nullable=False, comment="正文"),
        sa.Column("user_id", sa.Integer(), nullable=False, comment="作者ID"),
        sa.Column("group_id", sa.Integer(), nullable=False, comment="所属小组ID"),
        sa.Column("post_type", sa.String(length=10), server_default=sa.text("'text'"), nullable=False, comment="帖子类型"),
        sa.Column("image_url", sa.String(length=500), nullable=True),
        sa.Column("video_url", sa.String(length=500), nullable=True),
        sa.Column("music_url", sa.String(length=500), nullable=True),
        sa.Column("like_count", sa.Integer(), server_default=sa.text("0"), nullable=False, comment="点赞数 (反范式计数器)"),
        _created_at(),
        sa.CheckConstraint("like_count >= 0", name=op.f("ck_posts_like_count_non_negative")),
        sa.CheckConstraint("post_type IN ('text', 'image', 'video', 'music')", name=op.f("ck_posts_post_type_valid")),
        sa.ForeignKeyConstraint(["group_id"], ["groups.id"], name=op.f("fk_posts_group_id_groups")),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], name=op.f("fk_posts_user_id_users")),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_posts")),
    )
    op.create_index("ix_posts_group_id_created_at", "posts", ["group_id", "created_at"], unique=False)
    op.create_index("ix_posts_user_id_created_at", "posts", ["user_id", "created_at"], unique=False)

    op.create_table(
        "comments",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False, comment="主键 (自增)"),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False, comment="作者ID"),
        sa.Column("post_id", sa.Integer(), nullable=False, comment="帖子ID"),
        _created_at(),
        sa.ForeignKeyConstraint(["post_id"], ["posts.id"], name=op.f("fk_comments_post_id_posts")),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], name=op.f("fk_comments_user_id_users")),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_comments")),
    )
    op.create_index("ix_comments_post_id_created_at", "comments", ["post_id", "created_at"], unique=False)

    op.create_table(
        "likes",
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("post_id", sa.Integer(), nullable=False),
        _created_at(),
        sa.ForeignKeyConstraint(["post_id"], ["posts.id"], name=op.f("fk_likes_post_id_posts")),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], name=op.f("fk_likes_user_id_users")),
        sa.PrimaryKeyConstraint("user_id", "post_id", name=op.f("pk_likes")),
    )
    op.create_index("ix_likes_post_id", "likes", ["post_id"], unique=False)

    op.create_table(
        "reactions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False, comment="主键 (自增)"),
        sa.Column("post_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("emoji", sa.String(length=32), nullable=False),
        _created_at(),
        sa.ForeignKeyConstraint(["post_id"], ["posts.id"], name=op.f("fk_reactions_post_id_posts")),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], name=op.f("fk_reactions_user_id_users")),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_reactions")),
        sa.UniqueConstraint("post_id", "user_id", "emoji", name=op.f("uq_reactions_post_id_user_id_emoji")),
    )
    op.create_index(op.f("ix_reactions_reactions_post_id"), "reactions", ["post_id"], unique=False)

    op.create_table(
        "friendships",
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("friend_id", sa.Integer(), nullable=False),
        _created_at(),
        sa.CheckConstraint("user_id <> friend_id", name=op.f("ck_friendships_no_self_friendship")),
        sa.ForeignKeyConstraint(["friend_id"], ["users.id"], name=op.f("fk_friendships_friend_id_users")),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], name=op.f("fk_friendships_user_id_users")),
        sa.PrimaryKeyConstraint("user_id", "friend_id", name=op.f("pk_friendships")),
    )

    op.create_table(
        "friend_requests",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False, comment="主键 (自增)"),
        sa.Column("sender_id", sa.Integer(), nullable=False, comment="发起人"),
        sa.Column("receiver_id", sa.Integer(), nullable=False, comment="接收人"),
        sa.Column("status", sa.String(length=10), server_default=sa.text("'pending'"), nullable=False, comment="pending / accepted / rejected"),
        _created_at(),
        _updated_at(),
        sa.CheckConstraint("sender_id <> receiver_id", name=op.f("ck_friend_requests_no_self_request")),
        sa.CheckConstraint("status IN ('pending', 'accepted', 'rejected')", name=op.f("ck_friend_requests_status_valid")),
        sa.ForeignKeyConstraint(["receiver_id"], ["users.id"], name=op.f("fk_friend_requests_receiver_id_users")),
        sa.ForeignKeyConstraint(["sender_id"], ["users.id"], name=op.f("fk_friend_requests_sender_id_users")),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_friend_requests")),
        sa.UniqueConstraint("sender_id", "receiver_id", name=op.f("uq_friend_requests_sender_id_receiver_id")),
    )
    op.create_index("ix_friend_requests_receiver_id", "friend_requests", ["receiver_id"], unique=False)

    op.create_table(
        "followers",
        sa.Column("follower_id", sa.Integer(), nullable=False),
        sa.Column("following_id", sa.Integer(), nullable=False),
        _created_at(),
        sa.CheckConstraint("follower_id <> following_id", name=op.f("ck_followers_no_self_follow")),
        sa.ForeignKeyConstraint(["follower_id"], ["users.id"], name=op.f("fk_followers_follower_id_users")),
        sa.ForeignKeyConstraint(["following_id"], ["users.id"], name=op.f("fk_followers_following_id_users")),
        sa.PrimaryKeyConstraint("follower_id", "following_id", name=op.f("pk_followers")),
    )
    op.create_index("ix_followers_following_id", "followers", ["following_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_followers_following_id", table_name="followers")
    op.drop_table("followers")
    op.drop_index("ix_friend_requests_receiver_id", table_name="friend_requests")
    op.drop_table("friend_requests")
    op.drop_table("friendships")
    op.drop_index(op.f("ix_reactions_reactions_post_id"), table_name="reactions")
    op.drop_table("reactions")
    op.drop_index("ix_likes_post_id", table_name="likes")
    op.drop_table("likes")
    op.drop_index("ix_comments_post_id_created_at", table_name="comments")
    op.drop_table("comments")
    op.drop_index("ix_posts_user_id_created_at", table_name="posts")
    op.drop_index("ix_posts_group_id_created_at", table_name="posts")
    op.drop_table("posts")
    op.drop_index("ix_group_chat_group_id_created_at", table_name="group_chat")
    op.drop_table("group_chat")
    op.drop_index("ix_group_members_user_id", table_name="group_members")
    op.drop_table("group_members")
    op.drop_index(op.f("ix_groups_groups_category"), table_name="groups")
    op.drop_table("groups")
    op.drop_table("users")
