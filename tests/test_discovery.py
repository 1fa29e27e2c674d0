from datetime import datetime, timedelta, timezone

import pytest

from core.errors import InvalidFilterError
from schemas.discovery import DiscoveryFilter
from services.discovery import find_candidates
from services.swipe_ledger import record_swipe
from services.undo_window import undo_last_swipe

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
CENTER = {"lat": 40.0, "lng": -74.0}


async def _ids(db, requester_id, **filters):
    flt = DiscoveryFilter(**{**CENTER, **filters})
    return [c.profile.id for c in await find_candidates(db, requester_id, flt, now=NOW)]


async def test_requires_center_coordinate(db, make_profile):
    me = await make_profile()
    with pytest.raises(InvalidFilterError):
        await find_candidates(db, me.id, DiscoveryFilter(lat=40.0))
    with pytest.raises(InvalidFilterError):
        await find_candidates(db, me.id, DiscoveryFilter())


async def test_excludes_self_hiatus_and_deleted(db, make_profile):
    me = await make_profile()
    visible = await make_profile(latitude=40.01)
    await make_profile(latitude=40.01, hiatus=True)
    await make_profile(latitude=40.01, deleted_at=NOW)

    assert await _ids(db, me.id) == [visible.id]


async def test_orders_by_distance_within_radius(db, make_profile):
    me = await make_profile()
    far = await make_profile(latitude=40.3)       # ~33 км
    near = await make_profile(latitude=40.01)     # ~1 км
    middle = await make_profile(latitude=40.1)    # ~11 км
    await make_profile(latitude=41.0)             # ~111 км, вне радиуса

    assert await _ids(db, me.id, max_distance_km=50) == [near.id, middle.id, far.id]
    assert await _ids(db, me.id, max_distance_km=5) == [near.id]


async def test_boost_ranks_before_equal_or_farther(db, make_profile):
    me = await make_profile()
    plain_near = await make_profile(latitude=40.07)
    plain_same = await make_profile(latitude=40.1)
    boosted = await make_profile(latitude=40.1, boosted_until=NOW + timedelta(hours=3))
    expired = await make_profile(latitude=40.02, boosted_until=NOW - timedelta(hours=1))

    ids = await _ids(db, me.id)

    assert ids.index(boosted.id) < ids.index(plain_same.id)
    assert ids.index(expired.id) < ids.index(plain_near.id)
    assert ids.index(boosted.id) < ids.index(plain_near.id)


async def test_attribute_filters(db, make_profile):
    me = await make_profile()
    match = await make_profile(
        latitude=40.01, age=30, gender="male", interests=["hiking", "jazz"],
        preference="long-term", ethnicity="latino", education="masters", smoking=False,
    )
    await make_profile(latitude=40.01, age=45, gender="male", interests=["hiking"])
    await make_profile(latitude=40.01, age=30, gender="female", interests=["jazz"])
    await make_profile(latitude=40.01, age=30, gender="male", interests=["chess"])
    await make_profile(latitude=40.01, age=30, gender="male", interests=["jazz"], smoking=True)

    ids = await _ids(
        db, me.id,
        min_age=25, max_age=35, gender="male", interests=["jazz", "surfing"], smoking=False,
    )
    assert ids == [match.id]

    assert await _ids(db, me.id, preference="long-term", education="masters", ethnicity="latino") == [match.id]


async def test_page_size_and_single_pass(db, make_profile):
    me = await make_profile()
    for i in range(5):
        await make_profile(latitude=40.0 + 0.01 * (i + 1))

    flt = DiscoveryFilter(**CENTER, page_size=3)
    candidates = await find_candidates(db, me.id, flt, now=NOW)

    assert len(list(candidates)) == 3
    assert list(candidates) == []


async def test_each_call_increments_views(db, make_profile):
    me = await make_profile()
    flt = DiscoveryFilter(**CENTER)

    await find_candidates(db, me.id, flt, now=NOW)
    await find_candidates(db, me.id, flt, now=NOW)

    await db.refresh(me)
    assert me.views == 2


async def test_swiped_profiles_are_not_excluded(db, make_profile, publisher):
    me = await make_profile()
    liked = await make_profile(latitude=40.01)
    maybe = await make_profile(latitude=40.02)

    await record_swipe(db, me.id, liked.id, "right", publisher)
    await record_swipe(db, me.id, maybe.id, "up", publisher)
    await undo_last_swipe(db, me.id)

    assert await _ids(db, me.id) == [liked.id, maybe.id]


async def test_search_across_antimeridian(db, make_profile):
    me = await make_profile(latitude=0.0, longitude=179.95)
    east = await make_profile(latitude=0.0, longitude=-179.95)   # ~11 км через 180°

    flt = DiscoveryFilter(lat=0.0, lng=179.95, max_distance_km=20)
    ids = [c.profile.id for c in await find_candidates(db, me.id, flt, now=NOW)]
    assert ids == [east.id]
