"""Tweet Routes — short posts; edit/delete only by the author."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.api.dependencies import get_current_user
from vidtube.infrastructure.database import get_db
from vidtube.models.user import User
from vidtube.schemas.common import ApiResponse
from vidtube.schemas.content import TweetOut, TweetWrite
from vidtube.services.tweets import TweetService

router = APIRouter(prefix="/api/v1/tweets", tags=["tweets"])


@router.post(
    "", response_model=ApiResponse[TweetOut], status_code=status.HTTP_201_CREATED,
)
async def create_tweet(
    body: TweetWrite,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    tweet = await TweetService(db).create(user.id, body.content)
    return ApiResponse(
        message="Tweet created successfully", data=TweetOut.model_validate(tweet),
    )


@router.get("/user/{user_id}", response_model=ApiResponse[list[TweetOut]])
async def user_tweets(
    user_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    tweets = await TweetService(db).list_by_user(user_id)
    return ApiResponse(
        message="Tweets fetched successfully",
        data=[TweetOut.model_validate(t) for t in tweets],
    )


@router.patch("/{tweet_id}", response_model=ApiResponse[TweetOut])
async def update_tweet(
    tweet_id: UUID,
    body: TweetWrite,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    tweet = await TweetService(db).update(tweet_id, user.id, body.content)
    return ApiResponse(
        message="Tweet updated successfully", data=TweetOut.model_validate(tweet),
    )


@router.delete("/{tweet_id}", response_model=ApiResponse[dict])
async def delete_tweet(
    tweet_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await TweetService(db).delete(tweet_id, user.id)
    return ApiResponse(message="Tweet deleted successfully", data={})
