"""Playlist Schemas — create/update bodies and the playlist shape with its video ids."""

from datetime import datetime
from uuid import UUID

from pydantic import Field, field_validator

from vidtube.schemas.common import CamelModel


class PlaylistWrite(CamelModel):
    name: str = Field(min_length=1, max_length=150)
    desc: str = Field(min_length=1, max_length=5000)

    @field_validator("name", "desc")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name and desc cannot be blank")
        return v


class PlaylistOut(CamelModel):
    id: UUID
    owner_id: UUID
    name: str
    desc: str
    videos: list[UUID]
    created_at: datetime
    updated_at: datetime
