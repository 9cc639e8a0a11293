"""Subscription Routes — toggle a channel subscription, list subscribers and subscriptions."""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.api.dependencies import get_current_user
from vidtube.infrastructure.database import get_db
from vidtube.models.user import User
from vidtube.schemas.common import ApiResponse
from vidtube.schemas.engagement import ToggleResult
from vidtube.schemas.user import UserSummary
from vidtube.services.engagement import EngagementService
from vidtube.services.view_composer import ViewComposer

router = APIRouter(prefix="/api/v1/subscriptions", tags=["subscriptions"])


@router.post("/c/{channel_id}", response_model=ApiResponse[ToggleResult])
async def toggle_subscription(
    channel_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    active = await EngagementService(db).toggle_subscription(user.id, channel_id)
    message = "Subscribed successfully" if active else "Unsubscribed successfully"
    return ApiResponse(message=message, data=ToggleResult(active=active))


@router.get("/c/{channel_id}", response_model=ApiResponse[list[UserSummary]])
async def channel_subscribers(
    channel_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    subscribers = await ViewComposer(db).channel_subscribers(channel_id)
    return ApiResponse(message="Subscribers fetched successfully", data=subscribers)


@router.get("/u/{subscriber_id}", response_model=ApiResponse[list[UserSummary]])
async def subscribed_channels(
    subscriber_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    channels = await ViewComposer(db).subscribed_channels(subscriber_id)
    return ApiResponse(message="Subscribed channels fetched successfully", data=channels)
