"""Database Session Manager — pooled async sessions that translate driver failures into VidTubeError.

Invariants:
    - Every session rolls back on exception; nothing half-written is committed
    - A unique/foreign-key violation that escapes a service becomes ConflictError (409)
    - Values the database refuses (too long, wrong type) become InputValidationError (400)
    - Any other SQLAlchemy failure becomes DatabaseError (500) without driver text

Design Decisions:
    - db_manager is created in the lifespan, not at import time
    - expire_on_commit=False: services return ORM rows after commit
    - SQLite URLs (local runs, aiosqlite) skip the Postgres pool arguments
    - Toggles and registration catch IntegrityError themselves; the mapping here covers
      the violations no service anticipates
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import DataError, IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from vidtube.core.errors import (
    ConflictError, DatabaseError, ErrorContext, InputValidationError,
)

logger = logging.getLogger(__name__)


def _constraint_name(error: IntegrityError) -> str | None:
    """Best-effort constraint name from the driver exception (asyncpg exposes it)."""
    return getattr(error.orig, "constraint_name", None)


class DatabaseSessionManager:
    """Owns the engine and hands out one AsyncSession per request."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        engine_options: dict = {"pool_pre_ping": True}
        if not database_url.startswith("sqlite"):
            engine_options.update(
                pool_size=pool_size, max_overflow=max_overflow, pool_recycle=3600,
            )
        self.engine = create_async_engine(database_url, **engine_options)
        self._session_factory = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        session = self._session_factory()
        try:
            yield session
        except IntegrityError as e:
            await session.rollback()
            constraint = _constraint_name(e)
            logger.warning(
                f"Unhandled integrity violation ({constraint or 'unknown constraint'})",
                extra={"error_code": "CONFLICT", "reason": constraint},
            )
            raise ConflictError(
                "Resource conflicts with existing data",
                context=ErrorContext(debug_info={"constraint": constraint}),
            )
        except DataError as e:
            await session.rollback()
            logger.warning(
                f"Database rejected a value: {e.orig}",
                extra={"error_code": "VALIDATION_ERROR"},
            )
            raise InputValidationError("A submitted value is invalid or too long")
        except OperationalError as e:
            await session.rollback()
            logger.error(f"Database unavailable: {e}", extra={"error_code": "DATABASE_ERROR"})
            raise DatabaseError("Connection or operational error", "execute")
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"Database operation failed: {e}", extra={"error_code": "DATABASE_ERROR"})
            raise DatabaseError("Database operation failed", "query")
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """SELECT 1 through the pool; False on any failure (readiness probe)."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs):
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session
