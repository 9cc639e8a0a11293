"""Dashboard Routes — the authenticated owner's channel stats and video list."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.api.dependencies import get_current_user
from vidtube.infrastructure.database import get_db
from vidtube.models.user import User
from vidtube.schemas.common import ApiResponse, Page
from vidtube.schemas.user import ChannelStats
from vidtube.schemas.video import VideoOut
from vidtube.services.view_composer import ViewComposer

router = APIRouter(prefix="/api/v1/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=ApiResponse[ChannelStats])
async def channel_stats(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    stats = await ViewComposer(db).channel_stats(user.id)
    return ApiResponse(message="Channel stats fetched successfully", data=stats)


@router.get("/videos", response_model=ApiResponse[Page[VideoOut]])
async def channel_videos(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Every video of the owner, published or not, newest first."""
    videos = await ViewComposer(db).list_videos(
        user.id, page=page, limit=limit, include_unpublished=True,
    )
    return ApiResponse(message="Channel videos fetched successfully", data=videos)
