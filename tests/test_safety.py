import pytest

from core.errors import NotFoundError, SelfActionError
from services.safety import report_profile


async def test_third_report_puts_profile_on_hiatus(db, make_profile):
    target = await make_profile()
    reporters = [await make_profile() for _ in range(3)]

    await report_profile(db, reporters[0].id, target.id, "spam")
    await report_profile(db, reporters[1].id, target.id, "fake photos", location="downtown")
    await db.refresh(target)
    assert target.hiatus is False

    report = await report_profile(db, reporters[2].id, target.id, "harassment")
    await db.refresh(target)

    assert target.hiatus is True
    assert report.reported_id == target.id


async def test_cannot_report_self_or_missing(db, make_profile):
    me = await make_profile()
    with pytest.raises(SelfActionError):
        await report_profile(db, me.id, me.id, "test")
    with pytest.raises(NotFoundError):
        await report_profile(db, me.id, 42, "test")


async def test_repeated_reports_from_one_user_do_not_pause_profile(db, make_profile):
    target = await make_profile()
    reporter = await make_profile()

    for reason in ("spam", "spam again", "still spam"):
        await report_profile(db, reporter.id, target.id, reason)

    await db.refresh(target)
    assert target.hiatus is False
