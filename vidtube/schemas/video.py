"""Video Schemas — stored video shape and owner-joined read models."""

from datetime import datetime
from uuid import UUID

from vidtube.schemas.common import CamelModel
from vidtube.schemas.user import OwnerSummary


class VideoBase(CamelModel):
    id: UUID
    title: str
    description: str
    video_url: str
    thumbnail_url: str
    duration: float
    views: int
    is_published: bool
    created_at: datetime
    updated_at: datetime


class VideoOut(VideoBase):
    owner_id: UUID


class VideoWithOwner(VideoBase):
    """Video with `owner` replaced by the projected owner (None if the owner is gone)."""
    owner: OwnerSummary | None = None


class LikedVideo(CamelModel):
    liked_at: datetime
    video: VideoWithOwner
