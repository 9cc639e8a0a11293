"""Engagement Service — like and subscription toggles on top of the toggle engine.

Invariants:
    - The like target must exist at toggle time (ResourceNotFoundError otherwise);
      after that, a deleted target leaves a dangling like that readers skip
    - Subscribing to yourself is rejected before touching the table
      (the subscriptions CHECK constraint backs this up)
"""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.domain_types import LikeTarget, LikeTargetKind
from vidtube.core.errors import InputValidationError, ResourceNotFoundError
from vidtube.models.comment import Comment
from vidtube.models.like import Like
from vidtube.models.subscription import Subscription
from vidtube.models.tweet import Tweet
from vidtube.models.user import User
from vidtube.models.video import Video
from vidtube.services.toggle_engine import toggle_relation

logger = logging.getLogger(__name__)

_TARGET_MODELS = {
    LikeTargetKind.VIDEO: (Video, "Video"),
    LikeTargetKind.COMMENT: (Comment, "Comment"),
    LikeTargetKind.TWEET: (Tweet, "Tweet"),
}


class EngagementService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def toggle_like(self, actor_id: UUID, target: LikeTarget) -> bool:
        """Like or unlike `target`. Returns True if the like exists afterwards."""
        model, label = _TARGET_MODELS[target.kind]
        found = await self.db.scalar(select(model.id).where(model.id == target.id))
        if found is None:
            raise ResourceNotFoundError(label, str(target.id))
        active = await toggle_relation(
            self.db, Like,
            liked_by_id=actor_id, target_kind=target.kind, target_id=target.id,
        )
        logger.info(
            f"{label} like toggled (active={active})",
            extra={"user_id": str(actor_id), "resource_id": str(target.id)},
        )
        return active

    async def toggle_subscription(self, subscriber_id: UUID, channel_id: UUID) -> bool:
        """Subscribe or unsubscribe. Returns True if subscribed afterwards."""
        if subscriber_id == channel_id:
            raise InputValidationError(
                "You cannot subscribe to your own channel", fields=["channelId"],
            )
        found = await self.db.scalar(select(User.id).where(User.id == channel_id))
        if found is None:
            raise ResourceNotFoundError("Channel", str(channel_id))
        return await toggle_relation(
            self.db, Subscription,
            subscriber_id=subscriber_id, channel_id=channel_id,
        )
