"""Toggle Engine — race-safe create-if-absent / delete-if-present for binary relations.

Invariants:
    - Delete first (single DELETE ... RETURNING): a hit means the relation is now inactive
    - Otherwise insert and commit; the table's unique constraint on the match columns
      guarantees no duplicate even under concurrent toggles
    - A unique violation on insert means a concurrent request created the same relation:
      roll back and report active=True (no-op), never a fatal error
    - Commits its own transaction

Design Decisions:
    - Generic over model + match columns: Like (liked_by_id, target_kind, target_id) and
      Subscription (subscriber_id, channel_id) share one code path
    - No SAVEPOINT: the transaction only holds the no-op DELETE and the INSERT, so a full
      rollback loses nothing
"""

import logging
from typing import Any

from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


async def toggle_relation(
    db: AsyncSession, model: type, **match: Any,
) -> bool:
    """Flip the relation identified by `match`. Returns True if it now exists."""
    criteria = [getattr(model, column) == value for column, value in match.items()]
    deleted = await db.execute(
        delete(model).where(*criteria).returning(model.id),
    )
    if deleted.first() is not None:
        await db.commit()
        return False

    db.add(model(**match))
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.info(
            f"Concurrent toggle already created {model.__tablename__} relation",
            extra={"resource_type": model.__tablename__},
        )
    return True
