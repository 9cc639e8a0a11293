"""Ownership Gate — atomic "mutate/delete iff the caller owns the resource".

Invariants:
    - The ownership check and the mutation are ONE statement:
      UPDATE/DELETE ... WHERE id = :resource_id AND owner_id = :requester_id RETURNING *
    - Never read-then-write: ownership cannot change between check and mutation
    - A miss (absent OR not owned) returns None; require_owned turns it into
      NotFoundOrForbiddenError without revealing which case it was
    - The gate does not commit: callers own the transaction so follow-up statements
      (e.g. playlist membership) land atomically with the gated UPDATE

Design Decisions:
    - Generic over any model with id + owner_id (Video, Comment, Tweet, Playlist)
    - ORM-enabled UPDATE ... RETURNING with populate_existing: the returned instance
      reflects post-mutation state even if it was already in the identity map
    - values may be SQL expressions (`not_(Video.is_published)`), evaluated in the database
"""

import logging
from typing import Any, TypeVar
from uuid import UUID

from sqlalchemy import delete, update
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.errors import NotFoundOrForbiddenError

logger = logging.getLogger(__name__)

M = TypeVar("M")


async def mutate_if_owner(
    db: AsyncSession, model: type[M], resource_id: UUID, requester_id: UUID,
    **values: Any,
) -> M | None:
    """Apply `values` iff requester owns the row; return the updated row or None."""
    stmt = (
        update(model)
        .where(model.id == resource_id, model.owner_id == requester_id)
        .values(**values)
        .returning(model)
        .execution_options(populate_existing=True)
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def delete_if_owner(
    db: AsyncSession, model: type[M], resource_id: UUID, requester_id: UUID,
) -> M | None:
    """Delete iff requester owns the row; return the deleted row or None."""
    stmt = (
        delete(model)
        .where(model.id == resource_id, model.owner_id == requester_id)
        .returning(model)
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


def require_owned(
    row: M | None, resource_type: str, resource_id: UUID, requester_id: UUID,
) -> M:
    """Gate miss → NotFoundOrForbiddenError (same error for absent and not-owned)."""
    if row is None:
        logger.warning(
            f"Ownership gate rejected {resource_type} {resource_id}",
            extra={
                "user_id": str(requester_id),
                "resource_type": resource_type,
                "resource_id": str(resource_id),
            },
        )
        raise NotFoundOrForbiddenError(resource_type, str(resource_id))
    return row
