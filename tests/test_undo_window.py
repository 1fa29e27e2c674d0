from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import func, select

from core.errors import NoRecentActionError, UndoExpiredError
from models.like import Like
from models.match import Match
from models.maybe import MaybeEntry
from services.profiles import delete_profile
from services.swipe_ledger import Direction, record_swipe
from services.undo_window import undo_last_swipe

T0 = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


async def _likes(db, liker_id, liked_id):
    return await db.scalar(
        select(func.count(Like.id)).where(Like.liker_id == liker_id, Like.liked_id == liked_id)
    )


async def test_undo_right_swipe_removes_like(db, make_profile, publisher):
    a = await make_profile()
    b = await make_profile()
    await record_swipe(db, a.id, b.id, "right", publisher, now=T0)

    result = await undo_last_swipe(db, a.id, now=T0 + timedelta(minutes=5))

    assert result.direction is Direction.RIGHT
    assert result.restored_target_id == b.id
    assert await _likes(db, a.id, b.id) == 0
    # после отмены можно лайкнуть снова
    await record_swipe(db, a.id, b.id, "right", publisher, now=T0 + timedelta(minutes=6))
    assert await _likes(db, a.id, b.id) == 1


async def test_undo_is_single_shot(db, make_profile, publisher):
    a = await make_profile()
    b = await make_profile()
    await record_swipe(db, a.id, b.id, "right", publisher, now=T0)

    await undo_last_swipe(db, a.id, now=T0)
    with pytest.raises(NoRecentActionError):
        await undo_last_swipe(db, a.id, now=T0)


async def test_undo_without_any_swipe(db, make_profile):
    a = await make_profile()
    with pytest.raises(NoRecentActionError):
        await undo_last_swipe(db, a.id)


async def test_undo_window_boundary(db, make_profile, publisher):
    a = await make_profile()
    b = await make_profile()
    c = await make_profile()
    window = timedelta(hours=24)

    await record_swipe(db, a.id, b.id, "right", publisher, now=T0)
    result = await undo_last_swipe(db, a.id, now=T0 + window - timedelta(seconds=1))
    assert result.restored_target_id == b.id

    await record_swipe(db, a.id, c.id, "right", publisher, now=T0)
    with pytest.raises(UndoExpiredError):
        await undo_last_swipe(db, a.id, now=T0 + window + timedelta(seconds=1))
    assert await _likes(db, a.id, c.id) == 1


async def test_expired_undo_keeps_ledger_entry(db, make_profile, publisher):
    a = await make_profile()
    b = await make_profile()
    await record_swipe(db, a.id, b.id, "right", publisher, now=T0)

    with pytest.raises(UndoExpiredError):
        await undo_last_swipe(db, a.id, now=T0 + timedelta(hours=25))

    assert await _likes(db, a.id, b.id) == 1


async def test_undo_maybe_removes_from_maybe_list(db, make_profile, publisher):
    a = await make_profile()
    b = await make_profile()
    await record_swipe(db, a.id, b.id, "up", publisher, now=T0)

    result = await undo_last_swipe(db, a.id, now=T0 + timedelta(seconds=1))

    assert result.direction is Direction.UP
    entries = await db.scalar(select(func.count(MaybeEntry.id)).where(MaybeEntry.user_id == a.id))
    assert entries == 0


async def test_undo_after_target_hard_deleted_is_noop_success(db, make_profile, publisher):
    a = await make_profile()
    b = await make_profile()
    await record_swipe(db, a.id, b.id, "right", publisher, now=T0)
    await delete_profile(db, b.id, hard=True)

    result = await undo_last_swipe(db, a.id, now=T0 + timedelta(hours=1))

    assert result.restored_target_id == b.id
    with pytest.raises(NoRecentActionError):
        await undo_last_swipe(db, a.id, now=T0 + timedelta(hours=1))


async def test_undo_leaves_existing_match_intact(db, make_profile, publisher):
    a = await make_profile()
    b = await make_profile()
    await record_swipe(db, a.id, b.id, "right", publisher, now=T0)
    await record_swipe(db, b.id, a.id, "right", publisher, now=T0)

    await undo_last_swipe(db, b.id, now=T0 + timedelta(minutes=1))

    assert await _likes(db, b.id, a.id) == 0
    assert await db.scalar(select(func.count(Match.id))) == 1
