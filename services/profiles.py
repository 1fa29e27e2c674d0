"""Хранилище профилей: поиск, счётчики, флаги видимости, удаление."""
import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.errors import DuplicateActionError, NotFoundError
from models.last_swipe import LastSwipeAction
from models.like import Like
from models.match import Match
from models.maybe import MaybeEntry
from models.message import Message
from models.profile import Profile
from models.safety_report import SafetyReport
from utils.clock import as_utc, utcnow

logger = logging.getLogger(__name__)

COUNTERS = ("views", "swipes_right", "swipes_left", "super_likes_received")

UPDATABLE_FIELDS = (
    "name", "bio", "prompt", "photo_url", "latitude", "longitude", "age", "gender",
    "interests", "preference", "ethnicity", "education", "smoking", "telegram_user_id",
)


async def get_active_profile(db: AsyncSession, profile_id: int) -> Profile:
    result = await db.execute(
        select(Profile).where(Profile.id == profile_id, Profile.deleted_at.is_(None))
    )
    profile = result.scalar_one_or_none()
    if not profile:
        raise NotFoundError("Profile not found")
    return profile


async def create_profile(db: AsyncSession, data: Dict[str, Any]) -> Profile:
    """Регистрация: email уникален, повтор даёт DuplicateActionError."""
    data = dict(data)
    data["email"] = data["email"].strip().lower()
    profile = Profile(**data)
    try:
        async with db.begin_nested():
            db.add(profile)
            await db.flush()
    except IntegrityError:
        raise DuplicateActionError("Profile with this email already exists")
    await db.commit()
    await db.refresh(profile)
    logger.info("Profile %s registered: %s", profile.id, profile.email)
    return profile


async def increment_counter(db: AsyncSession, profile_id: int, counter: str, by: int = 1) -> None:
    """Атомарный инкремент в одном UPDATE, без read-modify-write."""
    if counter not in COUNTERS:
        raise ValueError(f"Unknown profile counter: {counter}")
    column = getattr(Profile, counter)
    await db.execute(
        update(Profile)
        .where(Profile.id == profile_id)
        .values({counter: column + by})
        .execution_options(synchronize_session=False)
    )


async def update_profile(db: AsyncSession, profile_id: int, changes: Dict[str, Any]) -> Profile:
    profile = await get_active_profile(db, profile_id)
    for key, value in changes.items():
        if key not in UPDATABLE_FIELDS:
            raise ValueError(f"Field {key} cannot be updated")
        setattr(profile, key, value)
    await db.commit()
    await db.refresh(profile)
    return profile


async def toggle_hiatus(db: AsyncSession, profile_id: int) -> bool:
    profile = await get_active_profile(db, profile_id)
    profile.hiatus = not profile.hiatus
    await db.commit()
    logger.info("User %s toggled hiatus to %s", profile_id, profile.hiatus)
    return profile.hiatus


async def boost_profile(
    db: AsyncSession, profile_id: int, now: Optional[datetime] = None
) -> datetime:
    profile = await get_active_profile(db, profile_id)
    now = now or utcnow()
    profile.boosted_until = now + timedelta(hours=settings.BOOST_DURATION_HOURS)
    await db.commit()
    logger.info("User %s boosted profile until %s", profile_id, profile.boosted_until)
    return profile.boosted_until


async def _message_stats(db: AsyncSession, profile_id: int, now: datetime) -> Dict[str, Any]:
    result = await db.execute(
        select(Message).where(
            or_(Message.sender_id == profile_id, Message.receiver_id == profile_id)
        )
    )
    messages = list(result.scalars().all())
    received = [m for m in messages if m.receiver_id == profile_id]
    sent = [m for m in messages if m.sender_id == profile_id]

    # Непрочитанные входящие идут в среднее с нулём
    total_seconds = sum(
        (as_utc(m.read_at or m.created_at) - as_utc(m.created_at)).total_seconds()
        for m in received
        if m.is_read
    )
    avg_minutes = total_seconds / len(received) / 60 if received else 0.0

    ghosted_before = now - timedelta(days=settings.GHOSTED_AFTER_DAYS)
    ghosted = sum(1 for m in sent if not m.is_read and as_utc(m.created_at) < ghosted_before)
    return {"avg_response_minutes": round(avg_minutes, 2), "ghosted_count": ghosted}


async def get_stats(
    db: AsyncSession, profile_id: int, now: Optional[datetime] = None
) -> Dict[str, Any]:
    profile = await get_active_profile(db, profile_id)
    await db.refresh(profile)
    matches_count = await db.scalar(
        select(func.count(Match.id)).where(
            or_(Match.user1_id == profile_id, Match.user2_id == profile_id)
        )
    )
    stats = {
        "views": profile.views,
        "swipes_right": profile.swipes_right,
        "swipes_left": profile.swipes_left,
        "super_likes": profile.super_likes_received,
        "matches": matches_count or 0,
    }
    stats.update(await _message_stats(db, profile_id, now or utcnow()))
    return stats


async def list_maybe(db: AsyncSession, profile_id: int) -> List[Profile]:
    result = await db.execute(
        select(Profile)
        .join(MaybeEntry, MaybeEntry.target_id == Profile.id)
        .where(MaybeEntry.user_id == profile_id, Profile.deleted_at.is_(None))
        .order_by(MaybeEntry.created_at.desc())
    )
    return list(result.scalars().all())


async def _delete_profile_data(db: AsyncSession, profile_id: int) -> None:
    await db.execute(
        delete(Like).where(or_(Like.liker_id == profile_id, Like.liked_id == profile_id))
    )
    await db.execute(
        delete(MaybeEntry).where(
            or_(MaybeEntry.user_id == profile_id, MaybeEntry.target_id == profile_id)
        )
    )
    await db.execute(
        delete(Match).where(or_(Match.user1_id == profile_id, Match.user2_id == profile_id))
    )
    await db.execute(delete(LastSwipeAction).where(LastSwipeAction.user_id == profile_id))
    await db.execute(
        delete(Message).where(
            or_(Message.sender_id == profile_id, Message.receiver_id == profile_id)
        )
    )
    await db.execute(
        delete(SafetyReport).where(
            or_(SafetyReport.reporter_id == profile_id, SafetyReport.reported_id == profile_id)
        )
    )
    await db.execute(delete(Profile).where(Profile.id == profile_id))


async def delete_profile(
    db: AsyncSession, profile_id: int, hard: bool = False, now: Optional[datetime] = None
) -> None:
    """Мягкое удаление прячет профиль, жёсткое удаляет его вместе со всеми связями."""
    profile = await get_active_profile(db, profile_id)
    if hard:
        await _delete_profile_data(db, profile_id)
        logger.info("Profile %s hard-deleted", profile_id)
    else:
        profile.deleted_at = now or utcnow()
        profile.hiatus = True
        logger.info("Profile %s soft-deleted", profile_id)
    await db.commit()
