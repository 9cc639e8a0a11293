"""Video Service — publish, watch, edit, delete and toggle-publish videos.

Invariants:
    - Publishing uploads the video file and thumbnail before inserting the row;
      a failed upload inserts nothing
    - Watching is one atomic `views = views + 1` plus a watch-history move-to-end
      in the same transaction
    - Edit, delete and toggle-publish go through the ownership gate (one statement each)

Design Decisions:
    - duration comes from the blob store; stores that cannot probe media report 0
    - Unpublished videos are visible to their owner only
"""

import logging
from uuid import UUID

from fastapi import UploadFile
from sqlalchemy import delete, not_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.config import Settings
from vidtube.core.account_rules import (
    VIDEO_TITLE_MAX_LENGTH, require_fields, require_max_lengths,
)
from vidtube.core.errors import InputValidationError, ResourceNotFoundError
from vidtube.core.repository_protocols import BlobStorage
from vidtube.infrastructure.uploads import store_upload
from vidtube.models.user import User
from vidtube.models.video import Video
from vidtube.models.watch_history import WatchHistoryEntry
from vidtube.schemas.video import VideoWithOwner
from vidtube.services.ownership_gate import delete_if_owner, mutate_if_owner, require_owned
from vidtube.services.view_composer import (
    OWNER_COLUMNS, project_owner, video_with_owner, visible_to,
)

logger = logging.getLogger(__name__)


def _require_file(upload: UploadFile | None, field: str) -> UploadFile:
    if upload is None or not upload.filename:
        raise InputValidationError(f"{field} file is required", fields=[field])
    return upload


class VideoService:

    def __init__(self, db: AsyncSession, settings: Settings, storage: BlobStorage):
        self.db = db
        self.settings = settings
        self.storage = storage

    async def publish(
        self,
        owner_id: UUID,
        title: str | None,
        description: str | None,
        video_file: UploadFile | None,
        thumbnail: UploadFile | None,
    ) -> Video:
        require_fields(title=title, description=description)
        require_max_lengths(title=(title.strip(), VIDEO_TITLE_MAX_LENGTH))
        video_file = _require_file(video_file, "videoFile")
        thumbnail = _require_file(thumbnail, "thumbnail")

        video_blob = await store_upload(
            self.storage, video_file, "videoFile", self.settings.upload_tmp_dir,
        )
        thumbnail_blob = await store_upload(
            self.storage, thumbnail, "thumbnail", self.settings.upload_tmp_dir,
        )

        video = Video(
            owner_id=owner_id,
            title=title.strip(),
            description=description.strip(),
            video_url=video_blob.url,
            thumbnail_url=thumbnail_blob.url,
            duration=video_blob.duration or 0.0,
        )
        self.db.add(video)
        await self.db.commit()
        await self.db.refresh(video)
        logger.info(
            f"Video published: {video.id}",
            extra={"user_id": str(owner_id), "resource_id": str(video.id)},
        )
        return video

    async def watch(self, video_id: UUID, viewer_id: UUID) -> VideoWithOwner:
        """Count a view, move the video to the end of the viewer's history, return it."""
        bumped = await self.db.execute(
            update(Video)
            .where(
                Video.id == video_id,
                visible_to(viewer_id),
            )
            .values(views=Video.views + 1)
            .returning(Video.id),
        )
        if bumped.scalar_one_or_none() is None:
            await self.db.rollback()
            raise ResourceNotFoundError("Video", str(video_id))

        await self.db.execute(
            delete(WatchHistoryEntry).where(
                WatchHistoryEntry.user_id == viewer_id,
                WatchHistoryEntry.video_id == video_id,
            ),
        )
        self.db.add(WatchHistoryEntry(user_id=viewer_id, video_id=video_id))
        await self.db.commit()

        result = await self.db.execute(
            select(Video, *OWNER_COLUMNS)
            .outerjoin(User, User.id == Video.owner_id)
            .where(Video.id == video_id)
            .execution_options(populate_existing=True),
        )
        row = result.one()
        return video_with_owner(row[0], project_owner(row))

    async def update(
        self,
        video_id: UUID,
        requester_id: UUID,
        title: str | None,
        description: str | None,
        thumbnail: UploadFile | None = None,
    ) -> Video:
        require_fields(title=title, description=description)
        require_max_lengths(title=(title.strip(), VIDEO_TITLE_MAX_LENGTH))
        values = {"title": title.strip(), "description": description.strip()}
        if thumbnail is not None and thumbnail.filename:
            blob = await store_upload(
                self.storage, thumbnail, "thumbnail", self.settings.upload_tmp_dir,
            )
            values["thumbnail_url"] = blob.url

        video = require_owned(
            await mutate_if_owner(self.db, Video, video_id, requester_id, **values),
            "Video", video_id, requester_id,
        )
        await self.db.commit()
        return video

    async def delete(self, video_id: UUID, requester_id: UUID) -> Video:
        video = require_owned(
            await delete_if_owner(self.db, Video, video_id, requester_id),
            "Video", video_id, requester_id,
        )
        await self.db.commit()
        logger.info(
            f"Video deleted: {video_id}",
            extra={"user_id": str(requester_id), "resource_id": str(video_id)},
        )
        return video

    async def toggle_publish(self, video_id: UUID, requester_id: UUID) -> Video:
        video = require_owned(
            await mutate_if_owner(
                self.db, Video, video_id, requester_id,
                is_published=not_(Video.is_published),
            ),
            "Video", video_id, requester_id,
        )
        await self.db.commit()
        return video
