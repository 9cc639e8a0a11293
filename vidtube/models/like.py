"""Like ORM — a user's like on exactly one video, comment, or tweet.

Invariants:
    - (liked_by_id, target_kind, target_id) is unique: at most one like per actor/target
    - target_kind + target_id encode the tagged union LikeTarget (core/domain_types.py)

Design Decisions:
    - No foreign key on target_id: it points into one of three tables. Dangling likes
      (target deleted later) are tolerated and filtered out by readers
    - The unique constraint is what makes concurrent toggles race-safe
"""

import uuid

from sqlalchemy import Enum, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from vidtube.core.domain_types import LikeTargetKind
from vidtube.db.base import Base, TimestampMixin


class Like(TimestampMixin, Base):
    __tablename__ = "likes"
    __table_args__ = (
        UniqueConstraint(
            "liked_by_id", "target_kind", "target_id",
            name="uq_likes_actor_target",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4,
    )
    liked_by_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    target_kind: Mapped[LikeTargetKind] = mapped_column(
        Enum(
            LikeTargetKind, native_enum=False, length=10,
            values_callable=lambda kinds: [k.value for k in kinds],
        ),
        nullable=False,
    )
    target_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
