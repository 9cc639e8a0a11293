"""Comment Routes — comments on a video; edit/delete only by the author."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.api.dependencies import get_current_user
from vidtube.infrastructure.database import get_db
from vidtube.models.user import User
from vidtube.schemas.common import ApiResponse, Page
from vidtube.schemas.content import CommentOut, CommentWrite
from vidtube.services.comments import CommentService

router = APIRouter(prefix="/api/v1/comments", tags=["comments"])


@router.get("/{video_id}", response_model=ApiResponse[Page[CommentOut]])
async def list_comments(
    video_id: UUID,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    comments = await CommentService(db).list_for_video(video_id, page, limit)
    return ApiResponse(message="Comments fetched successfully", data=comments)


@router.post(
    "/{video_id}", response_model=ApiResponse[CommentOut],
    status_code=status.HTTP_201_CREATED,
)
async def add_comment(
    video_id: UUID,
    body: CommentWrite,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    comment = await CommentService(db).add(video_id, user.id, body.content)
    return ApiResponse(
        message="Comment added successfully", data=CommentOut.model_validate(comment),
    )


@router.patch("/c/{comment_id}", response_model=ApiResponse[CommentOut])
async def update_comment(
    comment_id: UUID,
    body: CommentWrite,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    comment = await CommentService(db).update(comment_id, user.id, body.content)
    return ApiResponse(
        message="Comment updated successfully",
        data=CommentOut.model_validate(comment),
    )


@router.delete("/c/{comment_id}", response_model=ApiResponse[dict])
async def delete_comment(
    comment_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await CommentService(db).delete(comment_id, user.id)
    return ApiResponse(message="Comment deleted successfully", data={})
