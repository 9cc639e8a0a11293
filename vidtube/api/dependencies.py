"""API Dependencies — request-scoped wiring for auth, settings, and blob storage.

Invariants:
    - The access token is read from the `accessToken` cookie first, then from
      `Authorization: Bearer`; the cookie wins when both are present
    - get_current_user raises UnauthorizedError (401 envelope), never HTTPException
    - Routes receive services through these providers so tests can override them
"""

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.config import Settings, get_settings
from vidtube.core.repository_protocols import BlobStorage
from vidtube.infrastructure.blob_storage import LocalBlobStorage
from vidtube.infrastructure.database import get_db
from vidtube.models.user import User
from vidtube.services.auth_sessions import AuthSessionManager

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"

bearer_scheme = HTTPBearer(auto_error=False)


def token_from_request(
    request: Request, cookie_name: str,
    credentials: HTTPAuthorizationCredentials | None,
) -> str | None:
    cookie = request.cookies.get(cookie_name)
    if cookie:
        return cookie
    if credentials is not None:
        return credentials.credentials
    return None


def get_blob_storage(settings: Settings = Depends(get_settings)) -> BlobStorage:
    return LocalBlobStorage(settings.media_dir, settings.media_url_prefix)


def get_session_manager(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> AuthSessionManager:
    return AuthSessionManager(db, settings)


async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    sessions: AuthSessionManager = Depends(get_session_manager),
) -> User:
    token = token_from_request(request, ACCESS_COOKIE, credentials)
    return await sessions.authenticate(token)
