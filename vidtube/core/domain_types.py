"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - Token claims carry UserId (a NewType over UUID), not a bare string subject
    - A like target is exactly one of Video | Comment | Tweet (LikeTarget)
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over a dataclass wrapper for UserId: zero runtime cost, full type-checker support
    - LikeTarget as a frozen dataclass (kind + id) instead of three nullable columns:
      one target per like is enforced by construction
    - str Enums: serialize to JSON without custom encoders
"""

from dataclasses import dataclass
from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", UUID)


# ─── Enums ───────────────────────────────────────────────────────

class LikeTargetKind(str, Enum):
    """What a Like points at — maps to likes.target_kind."""
    VIDEO = "video"
    COMMENT = "comment"
    TWEET = "tweet"


class TokenType(str, Enum):
    """JWT `type` claim — access and refresh tokens are not interchangeable."""
    ACCESS = "access"
    REFRESH = "refresh"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class VideoSortField(str, Enum):
    """Public sort keys accepted by the video listing."""
    CREATED_AT = "createdAt"
    UPDATED_AT = "updatedAt"
    TITLE = "title"
    VIEWS = "views"
    DURATION = "duration"


# ─── Tagged Union ────────────────────────────────────────────────

@dataclass(frozen=True)
class LikeTarget:
    """Video(id) | Comment(id) | Tweet(id)."""
    kind: LikeTargetKind
    id: UUID

    @classmethod
    def video(cls, video_id: UUID) -> "LikeTarget":
        return cls(LikeTargetKind.VIDEO, video_id)

    @classmethod
    def comment(cls, comment_id: UUID) -> "LikeTarget":
        return cls(LikeTargetKind.COMMENT, comment_id)

    @classmethod
    def tweet(cls, tweet_id: UUID) -> "LikeTarget":
        return cls(LikeTargetKind.TWEET, tweet_id)
