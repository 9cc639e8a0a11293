"""User Routes — registration, session lifecycle, account updates, channel views.

Invariants:
    - Login and refresh set httpOnly `accessToken` / `refreshToken` cookies AND return
      the tokens in the body (clients without cookies use Authorization: Bearer)
    - Logout clears both cookies and the stored refresh token
    - Responses never carry password_hash or the stored refresh token (UserPublic)
"""

import logging

from fastapi import APIRouter, Depends, File, Form, Request, Response, UploadFile, status
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.api.dependencies import (
    ACCESS_COOKIE, REFRESH_COOKIE, bearer_scheme, get_blob_storage,
    get_current_user, get_session_manager, token_from_request,
)
from vidtube.config import Settings, get_settings
from vidtube.core.repository_protocols import BlobStorage
from vidtube.infrastructure.database import get_db
from vidtube.models.user import User
from vidtube.schemas.common import ApiResponse
from vidtube.schemas.user import (
    ChangePasswordRequest, ChannelProfile, LoginRequest, LoginResult, TokenPair,
    UpdateAccountRequest, UserPublic,
)
from vidtube.schemas.video import VideoWithOwner
from vidtube.services.accounts import AccountService
from vidtube.services.auth_sessions import AuthSessionManager
from vidtube.services.view_composer import ViewComposer

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/users", tags=["users"])


def _set_auth_cookies(
    response: Response, settings: Settings, access: str, refresh: str,
) -> None:
    common = {
        "httponly": True,
        "secure": settings.cookie_secure,
        "samesite": settings.cookie_samesite,
    }
    response.set_cookie(
        ACCESS_COOKIE, access,
        max_age=settings.access_token_expire_minutes * 60, **common,
    )
    response.set_cookie(
        REFRESH_COOKIE, refresh,
        max_age=settings.refresh_token_expire_days * 24 * 3600, **common,
    )


def _account_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    storage: BlobStorage = Depends(get_blob_storage),
) -> AccountService:
    return AccountService(db, settings, storage)


# ─── Registration & session lifecycle ────────────────────────────

@router.post(
    "/register", response_model=ApiResponse[UserPublic],
    status_code=status.HTTP_201_CREATED,
)
async def register(
    username: str | None = Form(None),
    email: str | None = Form(None),
    full_name: str | None = Form(None, alias="fullName"),
    password: str | None = Form(None),
    avatar: UploadFile | None = File(None),
    cover_image: UploadFile | None = File(None, alias="coverImage"),
    sessions: AuthSessionManager = Depends(get_session_manager),
    storage: BlobStorage = Depends(get_blob_storage),
):
    user = await sessions.register(
        username, email, full_name, password, avatar, cover_image, storage,
    )
    return ApiResponse(
        message="User registered successfully",
        data=UserPublic.model_validate(user),
    )


@router.post("/login", response_model=ApiResponse[LoginResult])
async def login(
    body: LoginRequest,
    response: Response,
    sessions: AuthSessionManager = Depends(get_session_manager),
    settings: Settings = Depends(get_settings),
):
    access, refresh, user = await sessions.login(
        body.username, body.email, body.password,
    )
    _set_auth_cookies(response, settings, access, refresh)
    return ApiResponse(
        message="User logged in successfully",
        data=LoginResult(
            user=UserPublic.model_validate(user),
            access_token=access, refresh_token=refresh,
        ),
    )


@router.post("/logout", response_model=ApiResponse[dict])
async def logout(
    response: Response,
    user: User = Depends(get_current_user),
    sessions: AuthSessionManager = Depends(get_session_manager),
):
    await sessions.logout(user.id)
    response.delete_cookie(ACCESS_COOKIE)
    response.delete_cookie(REFRESH_COOKIE)
    return ApiResponse(message="User logged out", data={})


@router.post("/refresh-token", response_model=ApiResponse[TokenPair])
async def refresh_token(
    request: Request,
    response: Response,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    sessions: AuthSessionManager = Depends(get_session_manager),
    settings: Settings = Depends(get_settings),
):
    incoming = token_from_request(request, REFRESH_COOKIE, credentials)
    access, refresh = await sessions.refresh(incoming)
    _set_auth_cookies(response, settings, access, refresh)
    return ApiResponse(
        message="Access token refreshed",
        data=TokenPair(access_token=access, refresh_token=refresh),
    )


@router.patch("/change-password", response_model=ApiResponse[dict])
async def change_password(
    body: ChangePasswordRequest,
    user: User = Depends(get_current_user),
    sessions: AuthSessionManager = Depends(get_session_manager),
):
    await sessions.change_password(user.id, body.old_password, body.new_password)
    return ApiResponse(message="Password changed successfully", data={})


# ─── Account ─────────────────────────────────────────────────────

@router.get("/current-user", response_model=ApiResponse[UserPublic])
async def current_user(user: User = Depends(get_current_user)):
    return ApiResponse(
        message="Current user fetched successfully",
        data=UserPublic.model_validate(user),
    )


@router.patch("/update-userDetails", response_model=ApiResponse[UserPublic])
async def update_user_details(
    body: UpdateAccountRequest,
    user: User = Depends(get_current_user),
    accounts: AccountService = Depends(_account_service),
):
    updated = await accounts.update_details(user.id, body.full_name, body.email)
    return ApiResponse(
        message="Account details updated successfully",
        data=UserPublic.model_validate(updated),
    )


@router.patch("/update-avatar", response_model=ApiResponse[UserPublic])
async def update_avatar(
    avatar: UploadFile | None = File(None),
    user: User = Depends(get_current_user),
    accounts: AccountService = Depends(_account_service),
):
    updated = await accounts.update_avatar(user.id, avatar)
    return ApiResponse(
        message="Avatar updated successfully",
        data=UserPublic.model_validate(updated),
    )


@router.patch("/update-coverImage", response_model=ApiResponse[UserPublic])
async def update_cover_image(
    cover_image: UploadFile | None = File(None, alias="coverImage"),
    user: User = Depends(get_current_user),
    accounts: AccountService = Depends(_account_service),
):
    updated = await accounts.update_cover_image(user.id, cover_image)
    return ApiResponse(
        message="Cover image updated successfully",
        data=UserPublic.model_validate(updated),
    )


# ─── Channel views ───────────────────────────────────────────────

@router.get("/channel/{username}", response_model=ApiResponse[ChannelProfile])
async def channel_profile(
    username: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    profile = await ViewComposer(db).channel_profile(username, user.id)
    return ApiResponse(message="Channel fetched successfully", data=profile)


@router.get("/watchHistory", response_model=ApiResponse[list[VideoWithOwner]])
async def watch_history(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    history = await ViewComposer(db).watch_history(user.id)
    return ApiResponse(message="Watch history fetched successfully", data=history)
