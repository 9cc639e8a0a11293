"""Comment Service — video comments: paginated list, add, gated edit and delete."""

import logging
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.errors import ResourceNotFoundError
from vidtube.core.listing import page_offset
from vidtube.models.comment import Comment
from vidtube.models.video import Video
from vidtube.schemas.common import Page, PageInfo
from vidtube.schemas.content import CommentOut
from vidtube.services.ownership_gate import delete_if_owner, mutate_if_owner, require_owned

logger = logging.getLogger(__name__)


class CommentService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _require_video(self, video_id: UUID) -> None:
        found = await self.db.scalar(select(Video.id).where(Video.id == video_id))
        if found is None:
            raise ResourceNotFoundError("Video", str(video_id))

    async def list_for_video(
        self, video_id: UUID, page: int = 1, limit: int = 10,
    ) -> Page[CommentOut]:
        """Newest comment first."""
        skip = page_offset(page, limit)
        await self._require_video(video_id)
        total = await self.db.scalar(
            select(func.count(Comment.id)).where(Comment.video_id == video_id),
        )
        result = await self.db.execute(
            select(Comment)
            .where(Comment.video_id == video_id)
            .order_by(Comment.created_at.desc(), Comment.id)
            .offset(skip).limit(limit),
        )
        return Page[CommentOut](
            items=[CommentOut.model_validate(c) for c in result.scalars()],
            pagination=PageInfo(page=page, limit=limit, total=total or 0),
        )

    async def add(self, video_id: UUID, owner_id: UUID, content: str) -> Comment:
        await self._require_video(video_id)
        comment = Comment(video_id=video_id, owner_id=owner_id, content=content)
        self.db.add(comment)
        await self.db.commit()
        await self.db.refresh(comment)
        return comment

    async def update(
        self, comment_id: UUID, requester_id: UUID, content: str,
    ) -> Comment:
        comment = require_owned(
            await mutate_if_owner(
                self.db, Comment, comment_id, requester_id, content=content,
            ),
            "Comment", comment_id, requester_id,
        )
        await self.db.commit()
        return comment

    async def delete(self, comment_id: UUID, requester_id: UUID) -> Comment:
        comment = require_owned(
            await delete_if_owner(self.db, Comment, comment_id, requester_id),
            "Comment", comment_id, requester_id,
        )
        await self.db.commit()
        logger.info(
            f"Comment deleted: {comment_id}",
            extra={"user_id": str(requester_id), "resource_id": str(comment_id)},
        )
        return comment
