"""User Schemas — account requests, public user shapes, and channel read models.

Invariants:
    - UserPublic never exposes password_hash or refresh_token
    - LoginRequest needs username or email (checked in core/account_rules.py)
    - UpdateAccountRequest needs at least one of fullName / email
"""

from datetime import datetime
from uuid import UUID

from pydantic import EmailStr, Field, model_validator

from vidtube.schemas.common import CamelModel


class UserPublic(CamelModel):
    id: UUID
    username: str
    email: str
    full_name: str
    avatar_url: str
    cover_image_url: str | None = None
    created_at: datetime
    updated_at: datetime


class OwnerSummary(CamelModel):
    """Projected owner embedded in video read models."""
    full_name: str
    username: str
    avatar_url: str


class UserSummary(OwnerSummary):
    """Owner projection plus id, for subscriber/subscription lists."""
    id: UUID


class LoginRequest(CamelModel):
    username: str | None = None
    email: str | None = None
    password: str = Field(min_length=1)


class LoginResult(CamelModel):
    user: UserPublic
    access_token: str
    refresh_token: str


class TokenPair(CamelModel):
    access_token: str
    refresh_token: str


class ChangePasswordRequest(CamelModel):
    old_password: str = Field(min_length=1)
    new_password: str = Field(min_length=8, max_length=72)


class UpdateAccountRequest(CamelModel):
    full_name: str | None = Field(None, min_length=1, max_length=100)
    email: EmailStr | None = None

    @model_validator(mode="after")
    def require_one_field(self):
        if self.full_name is None and self.email is None:
            raise ValueError("fullName or email is required")
        if self.full_name is not None and not self.full_name.strip():
            raise ValueError("fullName cannot be blank")
        return self


class ChannelProfile(CamelModel):
    id: UUID
    username: str
    full_name: str
    email: str
    avatar_url: str
    cover_image_url: str | None = None
    subscriber_count: int
    channels_subscribed_to_count: int
    is_subscribed: bool


class ChannelStats(CamelModel):
    total_videos: int
    total_views: int
    total_video_likes: int
    total_tweets: int
    total_tweet_likes: int
    total_comments: int
    total_comment_likes: int
    total_likes: int
    total_subscribers: int
