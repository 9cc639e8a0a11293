"""Ownership Gate & Toggle Engine — atomic owner-only writes and race-safe relation flips.

Invariants:
    - The gate never mutates or deletes a row the requester does not own
    - A gate miss raises NotFoundOrForbiddenError for absent and foreign rows alike
    - Toggling twice returns to the original state with no duplicate rows
    - An insert that loses a race to an identical relation reports active=True
"""

import logging
from uuid import uuid4

import pytest
from sqlalchemy import delete as sa_delete, false, func, not_, select

from vidtube.core.errors import NotFoundOrForbiddenError
from vidtube.models.subscription import Subscription
from vidtube.models.video import Video
from vidtube.services import toggle_engine
from vidtube.services.ownership_gate import delete_if_owner, mutate_if_owner, require_owned
from vidtube.services.toggle_engine import toggle_relation


async def test_gate_updates_owned_row(test_db, make_user, make_video):
    alice, _ = await make_user("alice")
    video = await make_video(alice, title="Before")

    updated = await mutate_if_owner(test_db, Video, video.id, alice.id, title="After")
    await test_db.commit()

    assert updated is not None
    assert updated.title == "After"


async def test_gate_refuses_foreign_row(test_db, make_user, make_video):
    alice, _ = await make_user("alice")
    bob, _ = await make_user("bob")
    video = await make_video(alice, title="Before")

    result = await mutate_if_owner(test_db, Video, video.id, bob.id, title="Hijacked")
    await test_db.commit()

    assert result is None
    title = await test_db.scalar(select(Video.title).where(Video.id == video.id))
    assert title == "Before"


async def test_gate_evaluates_expressions_in_database(test_db, make_user, make_video):
    alice, _ = await make_user("alice")
    video = await make_video(alice)

    flipped = await mutate_if_owner(
        test_db, Video, video.id, alice.id, is_published=not_(Video.is_published),
    )
    await test_db.commit()
    assert flipped.is_published is False


async def test_delete_gate_only_deletes_owned_row(test_db, make_user, make_video):
    alice, _ = await make_user("alice")
    bob, _ = await make_user("bob")
    video = await make_video(alice)

    assert await delete_if_owner(test_db, Video, video.id, bob.id) is None
    assert await delete_if_owner(test_db, Video, video.id, alice.id) is not None
    await test_db.commit()

    remaining = await test_db.scalar(select(func.count(Video.id)))
    assert remaining == 0


def test_require_owned_hides_which_case(caplog):
    with caplog.at_level(logging.WARNING):
        with pytest.raises(NotFoundOrForbiddenError) as exc:
            require_owned(None, "Video", uuid4(), uuid4())
    assert exc.value.http_status == 404
    assert "not found or not authorized" in exc.value.message
    assert any(r.levelno == logging.WARNING for r in caplog.records)


async def _subscription_count(db) -> int:
    return await db.scalar(select(func.count(Subscription.id)))


async def test_toggle_twice_restores_state(test_db, make_user):
    alice, _ = await make_user("alice")
    bob, _ = await make_user("bob")

    assert await toggle_relation(
        test_db, Subscription, subscriber_id=alice.id, channel_id=bob.id,
    ) is True
    assert await _subscription_count(test_db) == 1

    assert await toggle_relation(
        test_db, Subscription, subscriber_id=alice.id, channel_id=bob.id,
    ) is False
    assert await _subscription_count(test_db) == 0


async def test_toggle_losing_insert_race_reports_active(test_db, make_user, monkeypatch):
    alice, _ = await make_user("alice")
    bob, _ = await make_user("bob")
    test_db.add(Subscription(subscriber_id=alice.id, channel_id=bob.id))
    await test_db.commit()

    # The delete misses, as if it ran before a concurrent request's insert committed.
    monkeypatch.setattr(
        toggle_engine, "delete", lambda model: sa_delete(model).where(false()),
    )

    active = await toggle_relation(
        test_db, Subscription, subscriber_id=alice.id, channel_id=bob.id,
    )
    assert active is True
    assert await _subscription_count(test_db) == 1
