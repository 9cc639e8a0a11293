"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Video, Comment, Tweet, Playlist carry an immutable owner_id

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from vidtube.models.user import User  # noqa: F401
from vidtube.models.video import Video  # noqa: F401
from vidtube.models.comment import Comment  # noqa: F401
from vidtube.models.tweet import Tweet  # noqa: F401
from vidtube.models.like import Like  # noqa: F401
from vidtube.models.subscription import Subscription  # noqa: F401
from vidtube.models.playlist import Playlist, PlaylistVideo  # noqa: F401
from vidtube.models.watch_history import WatchHistoryEntry  # noqa: F401
