"""Playlist Service — owned, named video sets with gated membership changes.

Invariants:
    - Every mutation starts with the ownership gate; membership changes share the
      gated UPDATE's transaction, so the playlist row lock serializes them
    - Set semantics: adding a present video is a no-op, removing an absent one too
    - Video ids are returned in the order they were added

Design Decisions:
    - Membership lives in playlist_videos and is read with explicit queries
      (no relationship loading inside the async session)
"""

import logging
from collections import defaultdict
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.errors import ResourceNotFoundError
from vidtube.db.base import utcnow
from vidtube.models.playlist import Playlist, PlaylistVideo
from vidtube.models.user import User
from vidtube.models.video import Video
from vidtube.schemas.playlist import PlaylistOut
from vidtube.services.ownership_gate import delete_if_owner, mutate_if_owner, require_owned

logger = logging.getLogger(__name__)


def _to_out(playlist: Playlist, video_ids: list[UUID]) -> PlaylistOut:
    return PlaylistOut(
        id=playlist.id,
        owner_id=playlist.owner_id,
        name=playlist.name,
        desc=playlist.desc,
        videos=video_ids,
        created_at=playlist.created_at,
        updated_at=playlist.updated_at,
    )


class PlaylistService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _video_ids(self, playlist_id: UUID) -> list[UUID]:
        result = await self.db.execute(
            select(PlaylistVideo.video_id)
            .where(PlaylistVideo.playlist_id == playlist_id)
            .order_by(PlaylistVideo.added_at, PlaylistVideo.video_id),
        )
        return list(result.scalars().all())

    async def create(self, owner_id: UUID, name: str, desc: str) -> PlaylistOut:
        playlist = Playlist(owner_id=owner_id, name=name, desc=desc)
        self.db.add(playlist)
        await self.db.commit()
        await self.db.refresh(playlist)
        return _to_out(playlist, [])

    async def get(self, playlist_id: UUID) -> PlaylistOut:
        playlist = await self.db.get(Playlist, playlist_id)
        if playlist is None:
            raise ResourceNotFoundError("Playlist", str(playlist_id))
        return _to_out(playlist, await self._video_ids(playlist_id))

    async def list_by_user(self, user_id: UUID) -> list[PlaylistOut]:
        found = await self.db.scalar(select(User.id).where(User.id == user_id))
        if found is None:
            raise ResourceNotFoundError("User", str(user_id))

        playlists = (await self.db.execute(
            select(Playlist)
            .where(Playlist.owner_id == user_id)
            .order_by(Playlist.created_at.desc(), Playlist.id),
        )).scalars().all()

        members: dict[UUID, list[UUID]] = defaultdict(list)
        if playlists:
            rows = await self.db.execute(
                select(PlaylistVideo.playlist_id, PlaylistVideo.video_id)
                .where(PlaylistVideo.playlist_id.in_([p.id for p in playlists]))
                .order_by(PlaylistVideo.added_at, PlaylistVideo.video_id),
            )
            for playlist_id, video_id in rows:
                members[playlist_id].append(video_id)
        return [_to_out(p, members[p.id]) for p in playlists]

    async def update(
        self, playlist_id: UUID, requester_id: UUID, name: str, desc: str,
    ) -> PlaylistOut:
        playlist = require_owned(
            await mutate_if_owner(
                self.db, Playlist, playlist_id, requester_id, name=name, desc=desc,
            ),
            "Playlist", playlist_id, requester_id,
        )
        video_ids = await self._video_ids(playlist_id)
        await self.db.commit()
        return _to_out(playlist, video_ids)

    async def delete(self, playlist_id: UUID, requester_id: UUID) -> None:
        require_owned(
            await delete_if_owner(self.db, Playlist, playlist_id, requester_id),
            "Playlist", playlist_id, requester_id,
        )
        await self.db.execute(
            delete(PlaylistVideo).where(PlaylistVideo.playlist_id == playlist_id),
        )
        await self.db.commit()
        logger.info(
            f"Playlist deleted: {playlist_id}",
            extra={"user_id": str(requester_id), "resource_id": str(playlist_id)},
        )

    async def _touch(self, playlist_id: UUID, requester_id: UUID) -> Playlist:
        return require_owned(
            await mutate_if_owner(
                self.db, Playlist, playlist_id, requester_id, updated_at=utcnow(),
            ),
            "Playlist", playlist_id, requester_id,
        )

    async def add_video(
        self, playlist_id: UUID, video_id: UUID, requester_id: UUID,
    ) -> PlaylistOut:
        playlist = await self._touch(playlist_id, requester_id)
        video_exists = await self.db.scalar(select(Video.id).where(Video.id == video_id))
        if video_exists is None:
            await self.db.rollback()
            raise ResourceNotFoundError("Video", str(video_id))

        present = await self.db.scalar(
            select(PlaylistVideo.video_id).where(
                PlaylistVideo.playlist_id == playlist_id,
                PlaylistVideo.video_id == video_id,
            ),
        )
        if present is None:
            self.db.add(PlaylistVideo(playlist_id=playlist_id, video_id=video_id))
            await self.db.flush()
        video_ids = await self._video_ids(playlist_id)
        await self.db.commit()
        return _to_out(playlist, video_ids)

    async def remove_video(
        self, playlist_id: UUID, video_id: UUID, requester_id: UUID,
    ) -> PlaylistOut:
        playlist = await self._touch(playlist_id, requester_id)
        await self.db.execute(
            delete(PlaylistVideo).where(
                PlaylistVideo.playlist_id == playlist_id,
                PlaylistVideo.video_id == video_id,
            ),
        )
        video_ids = await self._video_ids(playlist_id)
        await self.db.commit()
        return _to_out(playlist, video_ids)
