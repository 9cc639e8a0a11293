"""User ORM — the credential store: identity, password hash, and the one live refresh token.

Invariants:
    - username and email are unique (username stored lower-case)
    - password_hash holds a bcrypt hash; plaintext is never persisted
    - refresh_token is NULL or the single currently valid refresh token;
      issuing a new session overwrites it, logout clears it
    - avatar_url is required, cover_image_url optional

Design Decisions:
    - refresh_token on the row (no token table): revocation is by overwrite, not a blacklist
    - watch history lives in watch_history rows, not an array column: order and
      membership changes stay single-statement
"""

import uuid

from sqlalchemy import String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from vidtube.db.base import Base, TimestampMixin


class User(TimestampMixin, Base):
    """Registered account (also the channel other users subscribe to)."""
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4,
    )
    username: Mapped[str] = mapped_column(
        String(30), nullable=False, unique=True, index=True,
    )
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    full_name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(100), nullable=False)
    avatar_url: Mapped[str] = mapped_column(String(500), nullable=False)
    cover_image_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    refresh_token: Mapped[str | None] = mapped_column(Text, nullable=True)
