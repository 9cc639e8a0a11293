"""Service test fixtures — async DB, fake blob storage, FastAPI test client, seed helpers.

Invariants:
    - Every test gets a fresh in-memory SQLite database (StaticPool: one shared connection)
    - get_db and get_blob_storage dependencies overridden for route tests
    - db_manager patched so the readiness probe hits the test database
    - Auth in route tests uses Authorization: Bearer (auth cookies are Secure and
      httpx does not send them to http://test)

Design Decisions:
    - SQLite in-memory: fast, no external dependency; RETURNING needs SQLite >= 3.35
    - Users seeded directly (bcrypt at rounds=4) instead of through /register,
      except in the registration tests themselves
"""

from itertools import count
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import vidtube.infrastructure.database as db_module
from vidtube.api.dependencies import get_blob_storage
from vidtube.config import get_settings
from vidtube.core.passwords import hash_password
from vidtube.core.repository_protocols import StoredBlob
from vidtube.db.base import Base
from vidtube.infrastructure.database import DatabaseSessionManager, get_db
from vidtube.main import app
from vidtube.models.comment import Comment
from vidtube.models.tweet import Tweet
from vidtube.models.user import User
from vidtube.models.video import Video
from vidtube.services.auth_sessions import AuthSessionManager

DEFAULT_PASSWORD = "password123"


class FakeBlobStorage:
    """In-memory BlobStorage: records each stored hint, can be told to fail."""

    def __init__(self, duration: float | None = 42.5):
        self.duration = duration
        self.stored: list[str] = []
        self.fail_on: set[str] = set()
        self.seen_paths: list[Path] = []
        self._seq = count(1)

    async def store(self, local_path: Path, hint_name: str) -> StoredBlob | None:
        self.seen_paths.append(local_path)
        if hint_name in self.fail_on:
            return None
        self.stored.append(hint_name)
        url = f"https://cdn.vidtube.io/{hint_name}/{next(self._seq)}"
        duration = self.duration if hint_name == "videoFile" else None
        return StoredBlob(url=url, duration=duration)


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def settings():
    return get_settings()


@pytest.fixture
def blob_storage():
    return FakeBlobStorage()


@pytest.fixture
async def client(test_engine, test_session_factory, blob_storage):
    """FastAPI test client with DB and blob storage dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_blob_storage] = lambda: blob_storage

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
def make_user(test_db, settings):
    """Factory: insert a user, return (user, Authorization headers)."""
    async def _make(username: str = "alice", password: str = DEFAULT_PASSWORD):
        user = User(
            username=username,
            email=f"{username}@vidtube.io",
            full_name=username.title(),
            password_hash=hash_password(password, rounds=settings.bcrypt_rounds),
            avatar_url=f"https://cdn.vidtube.io/avatar/{username}",
        )
        test_db.add(user)
        await test_db.commit()
        await test_db.refresh(user)
        access, _ = AuthSessionManager(test_db, settings).issue_tokens(user.id)
        return user, {"Authorization": f"Bearer {access}"}
    return _make


@pytest.fixture
def make_video(test_db):
    async def _make(owner: User, title: str = "First video", **fields) -> Video:
        values = {
            "description": f"About {title}",
            "video_url": "https://cdn.vidtube.io/videoFile/seed",
            "thumbnail_url": "https://cdn.vidtube.io/thumbnail/seed",
            "duration": 60.0,
        }
        values.update(fields)
        video = Video(owner_id=owner.id, title=title, **values)
        test_db.add(video)
        await test_db.commit()
        await test_db.refresh(video)
        return video
    return _make


@pytest.fixture
def make_comment(test_db):
    async def _make(owner: User, video: Video, content: str = "Nice video") -> Comment:
        comment = Comment(owner_id=owner.id, video_id=video.id, content=content)
        test_db.add(comment)
        await test_db.commit()
        await test_db.refresh(comment)
        return comment
    return _make


@pytest.fixture
def make_tweet(test_db):
    async def _make(owner: User, content: str = "Hello world") -> Tweet:
        tweet = Tweet(owner_id=owner.id, content=content)
        test_db.add(tweet)
        await test_db.commit()
        await test_db.refresh(tweet)
        return tweet
    return _make
