"""Playlist ORM — named, owned set of videos.

Invariants:
    - owner_id immutable; every mutation goes through the ownership gate
    - playlist_videos primary key (playlist_id, video_id): a video appears at most once
    - video ids are listed in the order they were added

Design Decisions:
    - Association table over an array column: add is an idempotent insert,
      remove is a single DELETE
    - No ORM relationship: membership is read with an explicit query so nothing
      lazy-loads inside the async session
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from vidtube.db.base import Base, TimestampMixin, utcnow


class Playlist(TimestampMixin, Base):
    __tablename__ = "playlists"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4,
    )
    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    name: Mapped[str] = mapped_column(String(150), nullable=False)
    desc: Mapped[str] = mapped_column(Text, nullable=False)


class PlaylistVideo(Base):
    """Membership row: one video in one playlist."""
    __tablename__ = "playlist_videos"

    playlist_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("playlists.id", ondelete="CASCADE"), primary_key=True,
    )
    video_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("videos.id", ondelete="CASCADE"), primary_key=True,
    )
    added_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )
