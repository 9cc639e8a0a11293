"""Session Manager — registration, password auth, and access/refresh token lifecycle.

Invariants:
    - One live refresh token per user (users.refresh_token): login overwrites it,
      logout clears it, refresh rotates it
    - Rotation is a compare-and-swap: UPDATE ... WHERE id = :uid AND refresh_token = :incoming.
      Of two concurrent refreshes with the same token at most one succeeds
    - Every refresh failure (signature, expiry, wrong type, missing user, stale token)
      raises the same UnauthorizedError; the cause is only in logs / error context
    - Only bcrypt hashes are stored; hashing runs in the threadpool
    - register uploads media before inserting: a failed upload creates no user

Design Decisions:
    - Access and refresh tokens signed with different secrets (core/tokens.py)
    - Username/email uniqueness checked up front (friendly 409 before uploading) AND
      enforced by unique indexes at insert time (race → ConflictError)
"""

import logging
from datetime import timedelta
from uuid import UUID

from fastapi import UploadFile
from fastapi.concurrency import run_in_threadpool
from sqlalchemy import or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.config import Settings
from vidtube.core.account_rules import normalize_login_identifier, normalize_registration
from vidtube.core.domain_types import TokenType
from vidtube.core.errors import (
    ConflictError, ErrorContext, InputValidationError, ResourceNotFoundError,
    UnauthorizedError,
)
from vidtube.core.passwords import hash_password, verify_password
from vidtube.core.repository_protocols import BlobStorage
from vidtube.core.tokens import TokenRejected, create_token, decode_token
from vidtube.infrastructure.uploads import store_upload
from vidtube.models.user import User

logger = logging.getLogger(__name__)


class AuthSessionManager:
    """Credential store operations and token issuance for one request."""

    def __init__(self, db: AsyncSession, settings: Settings):
        self.db = db
        self.settings = settings

    # ─── Token helpers ───────────────────────────────────────────

    def issue_tokens(self, user_id: UUID) -> tuple[str, str]:
        """Mint a fresh (access, refresh) pair. Does not persist anything."""
        access = create_token(
            user_id, TokenType.ACCESS, self.settings.access_token_secret,
            timedelta(minutes=self.settings.access_token_expire_minutes),
            self.settings.jwt_algorithm,
        )
        refresh = create_token(
            user_id, TokenType.REFRESH, self.settings.refresh_token_secret,
            timedelta(days=self.settings.refresh_token_expire_days),
            self.settings.jwt_algorithm,
        )
        return access, refresh

    def _reject(
        self, message: str, reason: str, user_id: UUID | None = None,
    ) -> UnauthorizedError:
        logger.warning(
            f"{message} ({reason})",
            extra={"reason": reason, "user_id": str(user_id) if user_id else None},
        )
        return UnauthorizedError(
            message, reason=reason,
            context=ErrorContext(user_id=str(user_id) if user_id else None),
        )

    # ─── Registration ────────────────────────────────────────────

    async def register(
        self,
        username: str | None,
        email: str | None,
        full_name: str | None,
        password: str | None,
        avatar: UploadFile | None,
        cover_image: UploadFile | None,
        storage: BlobStorage,
    ) -> User:
        form = normalize_registration(username, email, full_name, password)
        if avatar is None or not avatar.filename:
            raise InputValidationError("Avatar file is required", fields=["avatar"])

        existing = await self.db.execute(
            select(User.username, User.email).where(
                or_(User.username == form.username, User.email == form.email),
            ),
        )
        taken = existing.first()
        if taken:
            field = "username" if taken.username == form.username else "email"
            raise ConflictError(f"User with this {field} already exists", field)

        avatar_blob = await store_upload(
            storage, avatar, "avatar", self.settings.upload_tmp_dir,
        )
        cover_url = None
        if cover_image is not None and cover_image.filename:
            cover_blob = await store_upload(
                storage, cover_image, "coverImage", self.settings.upload_tmp_dir,
            )
            cover_url = cover_blob.url

        password_hash = await run_in_threadpool(
            hash_password, form.password, self.settings.bcrypt_rounds,
        )
        user = User(
            username=form.username,
            email=form.email,
            full_name=form.full_name,
            password_hash=password_hash,
            avatar_url=avatar_blob.url,
            cover_image_url=cover_url,
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError("Username or email already exists")
        await self.db.refresh(user)
        logger.info("User registered", extra={"user_id": str(user.id)})
        return user

    # ─── Session lifecycle ───────────────────────────────────────

    async def login(
        self, username: str | None, email: str | None, password: str,
    ) -> tuple[str, str, User]:
        """Verify credentials and start a new session, revoking the previous one."""
        identifier = normalize_login_identifier(username, email)
        result = await self.db.execute(
            select(User).where(
                or_(User.username == identifier, User.email == identifier),
            ),
        )
        user = result.scalars().first()
        if user is None:
            raise ResourceNotFoundError("User", identifier)

        matches = await run_in_threadpool(
            verify_password, password, user.password_hash,
        )
        if not matches:
            raise self._reject("Invalid user credentials", "wrong_password", user.id)

        access, refresh = self.issue_tokens(user.id)
        await self.db.execute(
            update(User).where(User.id == user.id).values(refresh_token=refresh),
        )
        await self.db.commit()
        logger.info("User logged in", extra={"user_id": str(user.id)})
        return access, refresh, user

    async def refresh(self, incoming_refresh_token: str | None) -> tuple[str, str]:
        """Rotate-on-use: swap the stored refresh token iff it equals the incoming one."""
        message = "Invalid or expired refresh token"
        try:
            claims = decode_token(
                incoming_refresh_token or "", self.settings.refresh_token_secret,
                TokenType.REFRESH, self.settings.jwt_algorithm,
            )
        except TokenRejected as e:
            raise self._reject(message, e.reason)

        access, refresh = self.issue_tokens(claims.user_id)
        result = await self.db.execute(
            update(User)
            .where(
                User.id == claims.user_id,
                User.refresh_token == incoming_refresh_token,
            )
            .values(refresh_token=refresh)
            .returning(User.id),
        )
        if result.scalar_one_or_none() is None:
            await self.db.rollback()
            user_exists = await self.db.scalar(
                select(User.id).where(User.id == claims.user_id),
            )
            reason = "stale_or_reused_token" if user_exists else "user_missing"
            raise self._reject(message, reason, claims.user_id)

        await self.db.commit()
        return access, refresh

    async def logout(self, user_id: UUID) -> None:
        """Clear the stored refresh token: every outstanding refresh token dies."""
        await self.db.execute(
            update(User).where(User.id == user_id).values(refresh_token=None),
        )
        await self.db.commit()
        logger.info("User logged out", extra={"user_id": str(user_id)})

    async def change_password(
        self, user_id: UUID, old_password: str, new_password: str,
    ) -> None:
        user = await self.db.get(User, user_id)
        if user is None:
            raise self._reject("Invalid access token", "user_missing", user_id)
        matches = await run_in_threadpool(
            verify_password, old_password, user.password_hash,
        )
        if not matches:
            raise self._reject("Old password is incorrect", "wrong_password", user_id)

        new_hash = await run_in_threadpool(
            hash_password, new_password, self.settings.bcrypt_rounds,
        )
        await self.db.execute(
            update(User).where(User.id == user_id).values(password_hash=new_hash),
        )
        await self.db.commit()
        logger.info("Password changed", extra={"user_id": str(user_id)})

    async def authenticate(self, access_token: str | None) -> User:
        """Resolve a bearer access token to a live user."""
        message = "Invalid or expired access token"
        try:
            claims = decode_token(
                access_token or "", self.settings.access_token_secret,
                TokenType.ACCESS, self.settings.jwt_algorithm,
            )
        except TokenRejected as e:
            raise self._reject(message, e.reason)

        user = await self.db.get(User, claims.user_id)
        if user is None:
            raise self._reject(message, "user_missing", claims.user_id)
        return user
