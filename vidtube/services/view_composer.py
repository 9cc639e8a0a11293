"""View Composer — read-only multi-table joins that build derived read models.

Invariants:
    - Read-only: no method adds, updates, deletes or commits anything
    - Each view is one SQL statement (plus a count for paginated listings), so every
      number in a view comes from the same snapshot
    - Owner projection is {fullName, username, avatarUrl}; a video whose owner row is
      gone gets owner=None (outer join), never an error
    - Dangling references are dropped by inner joins (tombstone filtering): a like or
      watch-history entry whose video was deleted does not appear
    - Unpublished videos appear only in their owner's views (visible_to)
    - One-to-many joins flatten to the first match (user ids are unique, so the owner
      join yields at most one row per video)

Design Decisions:
    - Counts as correlated scalar subqueries instead of GROUP BY over several joins:
      no row multiplication between subscriber and subscription counts
    - Sort keys validated in core/listing.py; mapped to columns here
"""

import logging
from uuid import UUID

from sqlalchemy import and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.account_rules import normalize_username
from vidtube.core.domain_types import LikeTargetKind, SortDirection, VideoSortField
from vidtube.core.errors import ResourceNotFoundError
from vidtube.core.listing import LIKE_ESCAPE_CHAR, contains_pattern, page_offset, resolve_sort
from vidtube.models.comment import Comment
from vidtube.models.like import Like
from vidtube.models.subscription import Subscription
from vidtube.models.tweet import Tweet
from vidtube.models.user import User
from vidtube.models.video import Video
from vidtube.models.watch_history import WatchHistoryEntry
from vidtube.schemas.common import Page, PageInfo
from vidtube.schemas.user import ChannelProfile, ChannelStats, OwnerSummary, UserSummary
from vidtube.schemas.video import LikedVideo, VideoBase, VideoOut, VideoWithOwner

logger = logging.getLogger(__name__)

_SORT_COLUMNS = {
    VideoSortField.CREATED_AT: Video.created_at,
    VideoSortField.UPDATED_AT: Video.updated_at,
    VideoSortField.TITLE: Video.title,
    VideoSortField.VIEWS: Video.views,
    VideoSortField.DURATION: Video.duration,
}

OWNER_COLUMNS = (
    User.full_name.label("owner_full_name"),
    User.username.label("owner_username"),
    User.avatar_url.label("owner_avatar_url"),
)


def project_owner(row) -> OwnerSummary | None:
    """Owner sub-object from the labelled owner columns (None when the join missed)."""
    if row.owner_username is None:
        return None
    return OwnerSummary(
        full_name=row.owner_full_name,
        username=row.owner_username,
        avatar_url=row.owner_avatar_url,
    )


def video_with_owner(video: Video, owner: OwnerSummary | None) -> VideoWithOwner:
    fields = {name: getattr(video, name) for name in VideoBase.model_fields}
    return VideoWithOwner.model_validate({**fields, "owner": owner})


def visible_to(viewer_id: UUID):
    """Published videos, plus the viewer's own unpublished ones."""
    return or_(Video.is_published.is_(True), Video.owner_id == viewer_id)


def _count(model, *criteria):
    return select(func.count(model.id)).where(*criteria).scalar_subquery()


def _like_count(target_model, kind: LikeTargetKind, owner_id: UUID):
    return (
        select(func.count(Like.id))
        .join(target_model, and_(
            Like.target_kind == kind, Like.target_id == target_model.id,
        ))
        .where(target_model.owner_id == owner_id)
        .scalar_subquery()
    )


class ViewComposer:
    """Derived read views over users, videos, comments, tweets, likes, subscriptions."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _require_user(self, user_id: UUID) -> None:
        exists = await self.db.scalar(select(User.id).where(User.id == user_id))
        if exists is None:
            raise ResourceNotFoundError("User", str(user_id))

    # ─── Channel views ───────────────────────────────────────────

    async def channel_profile(
        self, username: str, requester_id: UUID,
    ) -> ChannelProfile:
        subscriber_count = (
            select(func.count(Subscription.id))
            .where(Subscription.channel_id == User.id)
            .correlate(User).scalar_subquery()
        )
        subscribed_to_count = (
            select(func.count(Subscription.id))
            .where(Subscription.subscriber_id == User.id)
            .correlate(User).scalar_subquery()
        )
        is_subscribed = (
            select(Subscription.id)
            .where(
                Subscription.channel_id == User.id,
                Subscription.subscriber_id == requester_id,
            )
            .correlate(User).exists()
        )
        result = await self.db.execute(
            select(
                User,
                subscriber_count.label("subscriber_count"),
                subscribed_to_count.label("subscribed_to_count"),
                is_subscribed.label("is_subscribed"),
            ).where(User.username == normalize_username(username)),
        )
        row = result.first()
        if row is None:
            raise ResourceNotFoundError("Channel", username)

        user = row[0]
        return ChannelProfile(
            id=user.id,
            username=user.username,
            full_name=user.full_name,
            email=user.email,
            avatar_url=user.avatar_url,
            cover_image_url=user.cover_image_url,
            subscriber_count=row.subscriber_count,
            channels_subscribed_to_count=row.subscribed_to_count,
            is_subscribed=bool(row.is_subscribed),
        )

    async def channel_stats(self, owner_id: UUID) -> ChannelStats:
        result = await self.db.execute(
            select(
                _count(Video, Video.owner_id == owner_id).label("videos"),
                select(func.coalesce(func.sum(Video.views), 0))
                .where(Video.owner_id == owner_id)
                .scalar_subquery().label("views"),
                _like_count(Video, LikeTargetKind.VIDEO, owner_id).label("video_likes"),
                _count(Tweet, Tweet.owner_id == owner_id).label("tweets"),
                _like_count(Tweet, LikeTargetKind.TWEET, owner_id).label("tweet_likes"),
                _count(Comment, Comment.owner_id == owner_id).label("comments"),
                _like_count(
                    Comment, LikeTargetKind.COMMENT, owner_id,
                ).label("comment_likes"),
                _count(
                    Subscription, Subscription.channel_id == owner_id,
                ).label("subscribers"),
            ),
        )
        row = result.one()
        return ChannelStats(
            total_videos=row.videos,
            total_views=row.views,
            total_video_likes=row.video_likes,
            total_tweets=row.tweets,
            total_tweet_likes=row.tweet_likes,
            total_comments=row.comments,
            total_comment_likes=row.comment_likes,
            total_likes=row.video_likes + row.tweet_likes + row.comment_likes,
            total_subscribers=row.subscribers,
        )

    # ─── Personal views ──────────────────────────────────────────

    async def watch_history(self, user_id: UUID) -> list[VideoWithOwner]:
        """Watch history in list order; deleted and hidden videos are skipped."""
        result = await self.db.execute(
            select(Video, *OWNER_COLUMNS)
            .join(WatchHistoryEntry, WatchHistoryEntry.video_id == Video.id)
            .outerjoin(User, User.id == Video.owner_id)
            .where(WatchHistoryEntry.user_id == user_id, visible_to(user_id))
            .order_by(WatchHistoryEntry.id),
        )
        return [video_with_owner(row[0], project_owner(row)) for row in result]

    async def liked_videos(self, user_id: UUID) -> list[LikedVideo]:
        """Videos the user liked, newest like first; likes on deleted or hidden videos are dropped."""
        result = await self.db.execute(
            select(Like.created_at.label("liked_at"), Video, *OWNER_COLUMNS)
            .join(Video, and_(
                Like.target_kind == LikeTargetKind.VIDEO,
                Like.target_id == Video.id,
            ))
            .outerjoin(User, User.id == Video.owner_id)
            .where(Like.liked_by_id == user_id, visible_to(user_id))
            .order_by(Like.created_at.desc(), Like.id),
        )
        return [
            LikedVideo(
                liked_at=row.liked_at,
                video=video_with_owner(row.Video, project_owner(row)),
            )
            for row in result
        ]

    # ─── Listings ────────────────────────────────────────────────

    async def list_videos(
        self,
        owner_id: UUID,
        query: str | None = None,
        sort_by: str | None = None,
        sort_type: str | None = None,
        page: int = 1,
        limit: int = 10,
        include_unpublished: bool = False,
    ) -> Page[VideoOut]:
        field, direction = resolve_sort(sort_by, sort_type)
        skip = page_offset(page, limit)
        await self._require_user(owner_id)

        criteria = [Video.owner_id == owner_id]
        if query and query.strip():
            criteria.append(Video.title.ilike(
                contains_pattern(query.strip()), escape=LIKE_ESCAPE_CHAR,
            ))
        if not include_unpublished:
            criteria.append(Video.is_published.is_(True))

        column = _SORT_COLUMNS[field]
        ordering = column.asc() if direction == SortDirection.ASC else column.desc()

        total = await self.db.scalar(
            select(func.count(Video.id)).where(*criteria),
        )
        result = await self.db.execute(
            select(Video).where(*criteria)
            .order_by(ordering, Video.id)
            .offset(skip).limit(limit),
        )
        return Page[VideoOut](
            items=[VideoOut.model_validate(v) for v in result.scalars()],
            pagination=PageInfo(page=page, limit=limit, total=total or 0),
        )

    async def channel_subscribers(self, channel_id: UUID) -> list[UserSummary]:
        await self._require_user(channel_id)
        result = await self.db.execute(
            select(User)
            .join(Subscription, Subscription.subscriber_id == User.id)
            .where(Subscription.channel_id == channel_id)
            .order_by(Subscription.created_at.desc()),
        )
        return [UserSummary.model_validate(u) for u in result.scalars()]

    async def subscribed_channels(self, subscriber_id: UUID) -> list[UserSummary]:
        await self._require_user(subscriber_id)
        result = await self.db.execute(
            select(User)
            .join(Subscription, Subscription.channel_id == User.id)
            .where(Subscription.subscriber_id == subscriber_id)
            .order_by(Subscription.created_at.desc()),
        )
        return [UserSummary.model_validate(u) for u in result.scalars()]
