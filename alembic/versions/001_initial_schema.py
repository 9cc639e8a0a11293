"""Initial schema — users, videos, comments, tweets, likes, subscriptions,
playlists, playlist_videos, watch_history.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def _owner(table: str) -> sa.Column:
    return sa.Column(
        "owner_id", sa.Uuid,
        sa.ForeignKey("users.id", ondelete="CASCADE", name=f"fk_{table}_owner_id_users"),
        nullable=False,
    )


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid, nullable=False),
        sa.Column("username", sa.String(30), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("full_name", sa.String(100), nullable=False),
        sa.Column("password_hash", sa.String(100), nullable=False),
        sa.Column("avatar_url", sa.String(500), nullable=False),
        sa.Column("cover_image_url", sa.String(500), nullable=True),
        sa.Column("refresh_token", sa.Text, nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)
    op.create_index("ix_users_full_name", "users", ["full_name"])

    op.create_table(
        "videos",
        sa.Column("id", sa.Uuid, nullable=False),
        _owner("videos"),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("video_url", sa.String(500), nullable=False),
        sa.Column("thumbnail_url", sa.String(500), nullable=False),
        sa.Column("duration", sa.Float, nullable=False, server_default="0"),
        sa.Column("views", sa.Integer, nullable=False, server_default="0"),
        sa.Column("is_published", sa.Boolean, nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_videos"),
    )
    op.create_index("ix_videos_owner_id", "videos", ["owner_id"])

    op.create_table(
        "comments",
        sa.Column("id", sa.Uuid, nullable=False),
        sa.Column(
            "video_id", sa.Uuid,
            sa.ForeignKey("videos.id", ondelete="CASCADE", name="fk_comments_video_id_videos"),
            nullable=False,
        ),
        _owner("comments"),
        sa.Column("content", sa.Text, nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_comments"),
    )
    op.create_index("ix_comments_video_id", "comments", ["video_id"])
    op.create_index("ix_comments_owner_id", "comments", ["owner_id"])

    op.create_table(
        "tweets",
        sa.Column("id", sa.Uuid, nullable=False),
        _owner("tweets"),
        sa.Column("content", sa.Text, nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_tweets"),
    )
    op.create_index("ix_tweets_owner_id", "tweets", ["owner_id"])

    op.create_table(
        "likes",
        sa.Column("id", sa.Uuid, nullable=False),
        sa.Column(
            "liked_by_id", sa.Uuid,
            sa.ForeignKey("users.id", ondelete="CASCADE", name="fk_likes_liked_by_id_users"),
            nullable=False,
        ),
        sa.Column("target_kind", sa.String(10), nullable=False),
        sa.Column("target_id", sa.Uuid, nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_likes"),
        sa.UniqueConstraint(
            "liked_by_id", "target_kind", "target_id", name="uq_likes_actor_target",
        ),
    )
    op.create_index("ix_likes_liked_by_id", "likes", ["liked_by_id"])
    op.create_index("ix_likes_target_id", "likes", ["target_id"])

    op.create_table(
        "subscriptions",
        sa.Column("id", sa.Uuid, nullable=False),
        sa.Column(
            "subscriber_id", sa.Uuid,
            sa.ForeignKey(
                "users.id", ondelete="CASCADE",
                name="fk_subscriptions_subscriber_id_users",
            ),
            nullable=False,
        ),
        sa.Column(
            "channel_id", sa.Uuid,
            sa.ForeignKey(
                "users.id", ondelete="CASCADE",
                name="fk_subscriptions_channel_id_users",
            ),
            nullable=False,
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_subscriptions"),
        sa.UniqueConstraint("subscriber_id", "channel_id", name="uq_subscriptions_pair"),
        sa.CheckConstraint(
            "channel_id <> subscriber_id", name="ck_subscriptions_not_self",
        ),
    )
    op.create_index("ix_subscriptions_subscriber_id", "subscriptions", ["subscriber_id"])
    op.create_index("ix_subscriptions_channel_id", "subscriptions", ["channel_id"])

    op.create_table(
        "playlists",
        sa.Column("id", sa.Uuid, nullable=False),
        _owner("playlists"),
        sa.Column("name", sa.String(150), nullable=False),
        sa.Column("desc", sa.Text, nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_playlists"),
    )
    op.create_index("ix_playlists_owner_id", "playlists", ["owner_id"])

    op.create_table(
        "playlist_videos",
        sa.Column(
            "playlist_id", sa.Uuid,
            sa.ForeignKey(
                "playlists.id", ondelete="CASCADE",
                name="fk_playlist_videos_playlist_id_playlists",
            ),
            nullable=False,
        ),
        sa.Column(
            "video_id", sa.Uuid,
            sa.ForeignKey(
                "videos.id", ondelete="CASCADE",
                name="fk_playlist_videos_video_id_videos",
            ),
            nullable=False,
        ),
        sa.Column("added_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("playlist_id", "video_id", name="pk_playlist_videos"),
    )

    op.create_table(
        "watch_history",
        sa.Column("id", sa.Integer, nullable=False, autoincrement=True),
        sa.Column(
            "user_id", sa.Uuid,
            sa.ForeignKey(
                "users.id", ondelete="CASCADE", name="fk_watch_history_user_id_users",
            ),
            nullable=False,
        ),
        sa.Column(
            "video_id", sa.Uuid,
            sa.ForeignKey(
                "videos.id", ondelete="CASCADE", name="fk_watch_history_video_id_videos",
            ),
            nullable=False,
        ),
        sa.Column("watched_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_watch_history"),
        sa.UniqueConstraint("user_id", "video_id", name="uq_watch_history_user_video"),
    )
    op.create_index("ix_watch_history_user_id", "watch_history", ["user_id"])


def downgrade() -> None:
    op.drop_table("watch_history")
    op.drop_table("playlist_videos")
    op.drop_table("playlists")
    op.drop_table("subscriptions")
    op.drop_table("likes")
    op.drop_table("tweets")
    op.drop_table("comments")
    op.drop_table("videos")
    op.drop_table("users")
