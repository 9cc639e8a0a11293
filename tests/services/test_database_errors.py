"""Database Session Manager — escaping SQLAlchemy errors become typed VidTubeErrors."""

import pytest
from sqlalchemy.exc import DataError, IntegrityError, OperationalError

from vidtube.core.errors import ConflictError, DatabaseError, InputValidationError
from vidtube.infrastructure.database import DatabaseSessionManager


@pytest.fixture
async def manager():
    m = DatabaseSessionManager("sqlite+aiosqlite://")
    yield m
    await m.dispose()


@pytest.mark.parametrize("raised,expected,status", [
    (IntegrityError("INSERT", {}, Exception("duplicate key")), ConflictError, 409),
    (DataError("INSERT", {}, Exception("value too long")), InputValidationError, 400),
    (OperationalError("SELECT", {}, Exception("connection refused")), DatabaseError, 500),
])
async def test_session_maps_driver_errors(manager, raised, expected, status):
    with pytest.raises(expected) as exc:
        async with manager.session():
            raise raised
    assert exc.value.http_status == status


async def test_conflict_keeps_driver_text_out_of_response(manager):
    with pytest.raises(ConflictError) as exc:
        async with manager.session():
            raise IntegrityError("INSERT", {}, Exception("uq_users_email detail"))
    assert "uq_users_email" not in str(exc.value.to_response())


async def test_health_check_against_sqlite(manager):
    assert await manager.health_check() is True
