"""Like Routes — toggle likes on videos, comments, tweets; list liked videos."""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.api.dependencies import get_current_user
from vidtube.core.domain_types import LikeTarget
from vidtube.infrastructure.database import get_db
from vidtube.models.user import User
from vidtube.schemas.common import ApiResponse
from vidtube.schemas.engagement import ToggleResult
from vidtube.schemas.video import LikedVideo
from vidtube.services.engagement import EngagementService
from vidtube.services.view_composer import ViewComposer

router = APIRouter(prefix="/api/v1/likes", tags=["likes"])


async def _toggle(db: AsyncSession, user: User, target: LikeTarget) -> ApiResponse:
    active = await EngagementService(db).toggle_like(user.id, target)
    message = "Liked successfully" if active else "Unliked successfully"
    return ApiResponse(message=message, data=ToggleResult(active=active))


@router.post("/toggle/v/{video_id}", response_model=ApiResponse[ToggleResult])
async def toggle_video_like(
    video_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await _toggle(db, user, LikeTarget.video(video_id))


@router.post("/toggle/c/{comment_id}", response_model=ApiResponse[ToggleResult])
async def toggle_comment_like(
    comment_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await _toggle(db, user, LikeTarget.comment(comment_id))


@router.post("/toggle/t/{tweet_id}", response_model=ApiResponse[ToggleResult])
async def toggle_tweet_like(
    tweet_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await _toggle(db, user, LikeTarget.tweet(tweet_id))


@router.get("/videos", response_model=ApiResponse[list[LikedVideo]])
async def liked_videos(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    videos = await ViewComposer(db).liked_videos(user.id)
    return ApiResponse(message="Liked videos fetched successfully", data=videos)
