"""Token Codec — JWT issuance and verification for access/refresh credentials.

Invariants:
    - Access and refresh tokens are signed with different secrets
    - Every token carries sub (user id), type, jti, iat, exp
    - jti is random: two tokens minted for the same user in the same second differ
    - decode_token raises TokenRejected with a machine-readable reason, never returns None

Design Decisions:
    - python-jose for JWT: same library the HTTPBearer auth flows in the pack use
    - `now` injectable: expiry tests run without sleeping
    - TokenRejected is not a VidTubeError: services translate it into UnauthorizedError
      so every cause collapses into one client-facing class
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from uuid import UUID

from jose import ExpiredSignatureError, JWTError, jwt

from vidtube.core.domain_types import TokenType, UserId


class TokenRejected(Exception):
    """Token failed verification. `reason` is for logs only."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


@dataclass(frozen=True)
class TokenClaims:
    user_id: UserId
    token_type: TokenType
    jti: str
    expires_at: datetime


def create_token(
    user_id: UUID,
    token_type: TokenType,
    secret: str,
    expires_in: timedelta,
    algorithm: str = "HS256",
    now: datetime | None = None,
) -> str:
    """Mint a signed JWT carrying only the identity claim."""
    issued_at = now or datetime.now(timezone.utc)
    claims = {
        "sub": str(user_id),
        "type": token_type.value,
        "jti": uuid.uuid4().hex,
        "iat": int(issued_at.timestamp()),
        "exp": int((issued_at + expires_in).timestamp()),
    }
    return jwt.encode(claims, secret, algorithm=algorithm)


def decode_token(
    token: str,
    secret: str,
    expected_type: TokenType,
    algorithm: str = "HS256",
) -> TokenClaims:
    """Verify signature, expiry and token type; return typed claims."""
    if not token or not isinstance(token, str):
        raise TokenRejected("missing")
    try:
        payload = jwt.decode(token, secret, algorithms=[algorithm])
    except ExpiredSignatureError:
        raise TokenRejected("expired")
    except JWTError:
        raise TokenRejected("invalid_signature_or_format")

    if payload.get("type") != expected_type.value:
        raise TokenRejected("wrong_token_type")
    try:
        user_id = UserId(UUID(payload["sub"]))
    except (KeyError, ValueError, TypeError):
        raise TokenRejected("malformed_subject")

    return TokenClaims(
        user_id=user_id,
        token_type=expected_type,
        jti=str(payload.get("jti", "")),
        expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
    )
