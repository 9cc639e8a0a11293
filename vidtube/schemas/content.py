"""Comment & Tweet Schemas — text content with field-level validation.

Invariants:
    - content is stripped and must be non-empty, at most 5000 chars (comments)
      or 500 chars (tweets)
"""

from datetime import datetime
from uuid import UUID

from pydantic import Field, field_validator

from vidtube.schemas.common import CamelModel


class _ContentBody(CamelModel):
    content: str

    @field_validator("content")
    @classmethod
    def strip_content(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("content cannot be empty or whitespace")
        return v


class CommentWrite(_ContentBody):
    content: str = Field(min_length=1, max_length=5000)


class TweetWrite(_ContentBody):
    content: str = Field(min_length=1, max_length=500)


class CommentOut(CamelModel):
    id: UUID
    video_id: UUID
    owner_id: UUID
    content: str
    created_at: datetime
    updated_at: datetime


class TweetOut(CamelModel):
    id: UUID
    owner_id: UUID
    content: str
    created_at: datetime
    updated_at: datetime
