from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import func, select

from core.errors import DuplicateActionError, NotFoundError
from models.like import Like
from models.match import Match
from models.message import Message
from models.profile import Profile
from services import profiles
from services.swipe_ledger import record_swipe

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


async def test_toggle_hiatus(db, make_profile):
    me = await make_profile()
    assert await profiles.toggle_hiatus(db, me.id) is True
    assert await profiles.toggle_hiatus(db, me.id) is False


async def test_boost_lasts_a_day(db, make_profile):
    me = await make_profile()
    boosted_until = await profiles.boost_profile(db, me.id, now=NOW)
    assert boosted_until == NOW + timedelta(hours=24)


async def test_stats_collects_counters_and_matches(db, make_profile, publisher):
    a = await make_profile()
    b = await make_profile()
    c = await make_profile()
    await record_swipe(db, b.id, a.id, "right", publisher, super_like=True)
    await record_swipe(db, c.id, a.id, "left", publisher)
    await record_swipe(db, a.id, b.id, "right", publisher)

    stats = await profiles.get_stats(db, a.id)

    assert stats == {
        "views": 0,
        "swipes_right": 1,
        "swipes_left": 1,
        "super_likes": 1,
        "matches": 1,
        "avg_response_minutes": 0.0,
        "ghosted_count": 0,
    }


async def test_increment_counter_rejects_unknown_column(db, make_profile):
    me = await make_profile()
    with pytest.raises(ValueError):
        await profiles.increment_counter(db, me.id, "age")


async def test_update_profile_changes_filter_attributes(db, make_profile):
    me = await make_profile()
    updated = await profiles.update_profile(db, me.id, {"latitude": 41.0, "interests": ["jazz"]})
    assert updated.latitude == 41.0
    assert updated.interests == ["jazz"]


async def test_soft_delete_hides_profile(db, make_profile):
    me = await make_profile()
    await profiles.delete_profile(db, me.id, now=NOW)

    with pytest.raises(NotFoundError):
        await profiles.get_active_profile(db, me.id)
    assert await db.get(Profile, me.id) is not None


async def test_hard_delete_cascades(db, make_profile, publisher):
    a = await make_profile()
    b = await make_profile()
    await record_swipe(db, a.id, b.id, "right", publisher)
    await record_swipe(db, b.id, a.id, "right", publisher)

    await profiles.delete_profile(db, b.id, hard=True)

    assert await db.scalar(select(func.count(Like.id))) == 0
    assert await db.scalar(select(func.count(Match.id))) == 0
    assert await db.scalar(select(func.count(Profile.id))) == 1


async def test_list_maybe(db, make_profile, publisher):
    me = await make_profile()
    b = await make_profile()
    c = await make_profile()
    await record_swipe(db, me.id, b.id, "up", publisher)
    await record_swipe(db, me.id, c.id, "up", publisher)

    ids = {p.id for p in await profiles.list_maybe(db, me.id)}
    assert ids == {b.id, c.id}


def _registration(**overrides):
    data = {
        "email": "Ann@Example.com",
        "name": "Ann",
        "age": 27,
        "gender": "female",
        "latitude": 40.0,
        "longitude": -74.0,
        "interests": ["jazz"],
    }
    data.update(overrides)
    return data


async def test_create_profile(db):
    profile = await profiles.create_profile(db, _registration())

    assert profile.id is not None
    assert profile.email == "ann@example.com"
    assert profile.hiatus is False
    assert profile.views == 0
    assert (await profiles.get_active_profile(db, profile.id)).name == "Ann"


async def test_create_profile_rejects_taken_email(db):
    await profiles.create_profile(db, _registration())
    with pytest.raises(DuplicateActionError):
        await profiles.create_profile(db, _registration(email=" ann@example.com ", name="Other"))

    assert await db.scalar(select(func.count(Profile.id))) == 1


async def test_stats_response_time_and_ghosting(db, make_profile):
    me = await make_profile()
    b = await make_profile()
    c = await make_profile()
    db.add_all([
        # Входящие: одно прочитано через 30 минут, второе не прочитано
        Message(sender_id=b.id, receiver_id=me.id, text="hi",
                created_at=NOW - timedelta(hours=2), is_read=True,
                read_at=NOW - timedelta(hours=1, minutes=30)),
        Message(sender_id=b.id, receiver_id=me.id, text="hello?",
                created_at=NOW - timedelta(hours=1)),
        # Исходящие: старое без ответа считается игнором, свежее нет
        Message(sender_id=me.id, receiver_id=c.id, text="hey",
                created_at=NOW - timedelta(days=6)),
        Message(sender_id=me.id, receiver_id=c.id, text="hey again",
                created_at=NOW - timedelta(days=1)),
    ])
    await db.commit()

    stats = await profiles.get_stats(db, me.id, now=NOW)

    assert stats["avg_response_minutes"] == 15.0
    assert stats["ghosted_count"] == 1
