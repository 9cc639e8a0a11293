"""Video Routes — listing, publish, watch, edit, delete, toggle publish."""

from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.api.dependencies import get_blob_storage, get_current_user
from vidtube.config import Settings, get_settings
from vidtube.core.repository_protocols import BlobStorage
from vidtube.infrastructure.database import get_db
from vidtube.models.user import User
from vidtube.schemas.common import ApiResponse, Page
from vidtube.schemas.video import VideoOut, VideoWithOwner
from vidtube.services.videos import VideoService
from vidtube.services.view_composer import ViewComposer

router = APIRouter(prefix="/api/v1/videos", tags=["videos"])


def _video_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    storage: BlobStorage = Depends(get_blob_storage),
) -> VideoService:
    return VideoService(db, settings, storage)


@router.get("", response_model=ApiResponse[Page[VideoOut]])
async def list_videos(
    user_id: UUID = Query(..., alias="userId"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    query: str | None = Query(None),
    sort_by: str | None = Query(None, alias="sortBy"),
    sort_type: str | None = Query(None, alias="sortType"),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Videos of one channel; the owner also sees unpublished ones."""
    listing = await ViewComposer(db).list_videos(
        user_id, query, sort_by, sort_type, page, limit,
        include_unpublished=user.id == user_id,
    )
    return ApiResponse(message="Videos fetched successfully", data=listing)


@router.post(
    "", response_model=ApiResponse[VideoOut], status_code=status.HTTP_201_CREATED,
)
async def publish_video(
    title: str | None = Form(None),
    description: str | None = Form(None),
    video_file: UploadFile | None = File(None, alias="videoFile"),
    thumbnail: UploadFile | None = File(None),
    user: User = Depends(get_current_user),
    videos: VideoService = Depends(_video_service),
):
    video = await videos.publish(user.id, title, description, video_file, thumbnail)
    return ApiResponse(
        message="Video published successfully", data=VideoOut.model_validate(video),
    )


@router.get("/{video_id}", response_model=ApiResponse[VideoWithOwner])
async def get_video(
    video_id: UUID,
    user: User = Depends(get_current_user),
    videos: VideoService = Depends(_video_service),
):
    video = await videos.watch(video_id, user.id)
    return ApiResponse(message="Video fetched successfully", data=video)


@router.patch("/{video_id}", response_model=ApiResponse[VideoOut])
async def update_video(
    video_id: UUID,
    title: str | None = Form(None),
    description: str | None = Form(None),
    thumbnail: UploadFile | None = File(None),
    user: User = Depends(get_current_user),
    videos: VideoService = Depends(_video_service),
):
    video = await videos.update(video_id, user.id, title, description, thumbnail)
    return ApiResponse(
        message="Video updated successfully", data=VideoOut.model_validate(video),
    )


@router.delete("/{video_id}", response_model=ApiResponse[dict])
async def delete_video(
    video_id: UUID,
    user: User = Depends(get_current_user),
    videos: VideoService = Depends(_video_service),
):
    await videos.delete(video_id, user.id)
    return ApiResponse(message="Video deleted successfully", data={})


@router.patch("/toggle/publish/{video_id}", response_model=ApiResponse[VideoOut])
async def toggle_publish(
    video_id: UUID,
    user: User = Depends(get_current_user),
    videos: VideoService = Depends(_video_service),
):
    video = await videos.toggle_publish(video_id, user.id)
    return ApiResponse(
        message="Publish status toggled", data=VideoOut.model_validate(video),
    )
