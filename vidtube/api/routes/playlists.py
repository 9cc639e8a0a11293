"""Playlist Routes — playlist CRUD and video membership (owner only for writes)."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.api.dependencies import get_current_user
from vidtube.infrastructure.database import get_db
from vidtube.models.user import User
from vidtube.schemas.common import ApiResponse
from vidtube.schemas.playlist import PlaylistOut, PlaylistWrite
from vidtube.services.playlists import PlaylistService

router = APIRouter(prefix="/api/v1/playlists", tags=["playlists"])


@router.post(
    "", response_model=ApiResponse[PlaylistOut], status_code=status.HTTP_201_CREATED,
)
async def create_playlist(
    body: PlaylistWrite,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    playlist = await PlaylistService(db).create(user.id, body.name, body.desc)
    return ApiResponse(message="Playlist created successfully", data=playlist)


@router.get("/user/{user_id}", response_model=ApiResponse[list[PlaylistOut]])
async def user_playlists(
    user_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    playlists = await PlaylistService(db).list_by_user(user_id)
    return ApiResponse(message="Playlists fetched successfully", data=playlists)


@router.get("/{playlist_id}", response_model=ApiResponse[PlaylistOut])
async def get_playlist(
    playlist_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    playlist = await PlaylistService(db).get(playlist_id)
    return ApiResponse(message="Playlist fetched successfully", data=playlist)


@router.patch("/{playlist_id}", response_model=ApiResponse[PlaylistOut])
async def update_playlist(
    playlist_id: UUID,
    body: PlaylistWrite,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    playlist = await PlaylistService(db).update(
        playlist_id, user.id, body.name, body.desc,
    )
    return ApiResponse(message="Playlist updated successfully", data=playlist)


@router.delete("/{playlist_id}", response_model=ApiResponse[dict])
async def delete_playlist(
    playlist_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await PlaylistService(db).delete(playlist_id, user.id)
    return ApiResponse(message="Playlist deleted successfully", data={})


@router.patch(
    "/add/{video_id}/{playlist_id}", response_model=ApiResponse[PlaylistOut],
)
async def add_video_to_playlist(
    video_id: UUID,
    playlist_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    playlist = await PlaylistService(db).add_video(playlist_id, video_id, user.id)
    return ApiResponse(message="Video added to playlist", data=playlist)


@router.patch(
    "/remove/{video_id}/{playlist_id}", response_model=ApiResponse[PlaylistOut],
)
async def remove_video_from_playlist(
    video_id: UUID,
    playlist_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    playlist = await PlaylistService(db).remove_video(playlist_id, video_id, user.id)
    return ApiResponse(message="Video removed from playlist", data=playlist)
