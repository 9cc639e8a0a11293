"""Tweet Service — short text posts: create, list by author, gated edit and delete."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.errors import ResourceNotFoundError
from vidtube.models.tweet import Tweet
from vidtube.models.user import User
from vidtube.services.ownership_gate import delete_if_owner, mutate_if_owner, require_owned


class TweetService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, owner_id: UUID, content: str) -> Tweet:
        tweet = Tweet(owner_id=owner_id, content=content)
        self.db.add(tweet)
        await self.db.commit()
        await self.db.refresh(tweet)
        return tweet

    async def list_by_user(self, user_id: UUID) -> list[Tweet]:
        found = await self.db.scalar(select(User.id).where(User.id == user_id))
        if found is None:
            raise ResourceNotFoundError("User", str(user_id))
        result = await self.db.execute(
            select(Tweet)
            .where(Tweet.owner_id == user_id)
            .order_by(Tweet.created_at.desc(), Tweet.id),
        )
        return list(result.scalars().all())

    async def update(self, tweet_id: UUID, requester_id: UUID, content: str) -> Tweet:
        tweet = require_owned(
            await mutate_if_owner(
                self.db, Tweet, tweet_id, requester_id, content=content,
            ),
            "Tweet", tweet_id, requester_id,
        )
        await self.db.commit()
        return tweet

    async def delete(self, tweet_id: UUID, requester_id: UUID) -> Tweet:
        tweet = require_owned(
            await delete_if_owner(self.db, Tweet, tweet_id, requester_id),
            "Tweet", tweet_id, requester_id,
        )
        await self.db.commit()
        return tweet
