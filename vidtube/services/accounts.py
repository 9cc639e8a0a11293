"""Account Service — profile updates for the authenticated user.

Invariants:
    - A user only ever updates their own row (filter on the authenticated id)
    - Email stays unique: a taken email raises ConflictError (409)
    - Media is uploaded before the row changes; a failed upload leaves the row untouched
"""

import logging
from uuid import UUID

from fastapi import UploadFile
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.config import Settings
from vidtube.core.account_rules import normalize_email
from vidtube.core.errors import ConflictError, InputValidationError, ResourceNotFoundError
from vidtube.core.repository_protocols import BlobStorage
from vidtube.infrastructure.uploads import store_upload
from vidtube.models.user import User

logger = logging.getLogger(__name__)


class AccountService:

    def __init__(self, db: AsyncSession, settings: Settings, storage: BlobStorage):
        self.db = db
        self.settings = settings
        self.storage = storage

    async def _update_self(self, user_id: UUID, **values) -> User:
        result = await self.db.execute(
            update(User).where(User.id == user_id).values(**values)
            .returning(User)
            .execution_options(populate_existing=True),
        )
        user = result.scalar_one_or_none()
        if user is None:
            raise ResourceNotFoundError("User", str(user_id))
        return user

    async def update_details(
        self, user_id: UUID, full_name: str | None, email: str | None,
    ) -> User:
        values: dict = {}
        if full_name is not None:
            values["full_name"] = full_name.strip()
        if email is not None:
            values["email"] = normalize_email(email)
            taken = await self.db.scalar(
                select(User.id).where(User.email == values["email"], User.id != user_id),
            )
            if taken:
                raise ConflictError("User with this email already exists", "email")

        try:
            user = await self._update_self(user_id, **values)
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError("User with this email already exists", "email")
        logger.info("Account details updated", extra={"user_id": str(user_id)})
        return user

    async def _replace_image(
        self, user_id: UUID, upload: UploadFile | None, field: str, column: str,
    ) -> User:
        if upload is None or not upload.filename:
            raise InputValidationError(f"{field} file is required", fields=[field])
        blob = await store_upload(
            self.storage, upload, field, self.settings.upload_tmp_dir,
        )
        user = await self._update_self(user_id, **{column: blob.url})
        await self.db.commit()
        logger.info(f"{field} updated", extra={"user_id": str(user_id)})
        return user

    async def update_avatar(self, user_id: UUID, upload: UploadFile | None) -> User:
        return await self._replace_image(user_id, upload, "avatar", "avatar_url")

    async def update_cover_image(
        self, user_id: UUID, upload: UploadFile | None,
    ) -> User:
        return await self._replace_image(
            user_id, upload, "coverImage", "cover_image_url",
        )
