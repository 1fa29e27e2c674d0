"""Леджер свайпов: вправо, влево, «может быть»."""
import enum
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import DuplicateActionError, InvalidDirectionError, SelfActionError
from models.last_swipe import LastSwipeAction
from models.like import Like
from models.match import Match
from models.maybe import MaybeEntry
from services.events import EventPublisher
from services.match_detector import check_reciprocity
from services.profiles import get_active_profile, increment_counter
from utils.clock import utcnow

logger = logging.getLogger(__name__)


class Direction(str, enum.Enum):
    RIGHT = "right"
    LEFT = "left"
    UP = "up"


DIRECTION_ALIASES = {
    "right": Direction.RIGHT,
    "left": Direction.LEFT,
    "skip": Direction.LEFT,
    "up": Direction.UP,
    "maybe": Direction.UP,
}


def parse_direction(value) -> Direction:
    if isinstance(value, Direction):
        return value
    try:
        return DIRECTION_ALIASES[str(value).strip().lower()]
    except KeyError:
        raise InvalidDirectionError(f"Invalid swipe direction: {value}")


@dataclass
class SwipeOutcome:
    direction: Direction
    target_id: int
    matched: bool = False
    match: Optional[Match] = None
    match_created: bool = False


async def _load_last_swipe(db: AsyncSession, user_id: int) -> Optional[LastSwipeAction]:
    result = await db.execute(
        select(LastSwipeAction).where(LastSwipeAction.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def _remember_last_swipe(
    db: AsyncSession, user_id: int, direction: Direction, target_id: int, now: datetime
) -> None:
    """Один снимок на пользователя: вставка, а если строка уже есть, обновление."""
    snapshot = await _load_last_swipe(db, user_id)
    if snapshot is not None:
        snapshot.direction = direction.value
        snapshot.target_id = target_id
        snapshot.created_at = now
        return

    try:
        async with db.begin_nested():
            db.add(LastSwipeAction(
                user_id=user_id, direction=direction.value, target_id=target_id, created_at=now,
            ))
            await db.flush()
    except IntegrityError:
        # Параллельный свайп того же пользователя успел записать снимок
        logger.info("Last swipe of user %s written concurrently, overwriting", user_id)
        await db.execute(
            update(LastSwipeAction)
            .where(LastSwipeAction.user_id == user_id)
            .values(direction=direction.value, target_id=target_id, created_at=now)
        )


async def _forget_last_swipe(db: AsyncSession, user_id: int) -> None:
    await db.execute(delete(LastSwipeAction).where(LastSwipeAction.user_id == user_id))


async def _insert_or_fail(db: AsyncSession, entry, duplicate_detail: str) -> None:
    # Уникальный индекс в БД — единственный арбитр дубликатов
    try:
        async with db.begin_nested():
            db.add(entry)
            await db.flush()
    except IntegrityError:
        raise DuplicateActionError(duplicate_detail)


async def record_swipe(
    db: AsyncSession,
    actor_id: int,
    target_id: int,
    direction,
    publisher: EventPublisher,
    super_like: bool = False,
    now: Optional[datetime] = None,
) -> SwipeOutcome:
    direction = parse_direction(direction)
    now = now or utcnow()

    # 1) Нельзя свайпать себя
    if actor_id == target_id:
        raise SelfActionError("You cannot swipe yourself")

    # 2) Оба профиля должны существовать и не быть удалёнными
    await get_active_profile(db, actor_id)
    await get_active_profile(db, target_id)

    outcome = SwipeOutcome(direction=direction, target_id=target_id)

    if direction is Direction.RIGHT:
        await _insert_or_fail(
            db,
            Like(liker_id=actor_id, liked_id=target_id, is_super_like=super_like, created_at=now),
            "You already liked this profile",
        )
        await increment_counter(db, target_id, "swipes_right")
        if super_like:
            await increment_counter(db, target_id, "super_likes_received")
        await _remember_last_swipe(db, actor_id, direction, target_id, now)
        await db.commit()
        logger.info(
            "User %s swiped right on %s%s", actor_id, target_id, " (super like)" if super_like else ""
        )

        # 3) Проверяем взаимность
        result = await check_reciprocity(db, actor_id, target_id, publisher)
        outcome.matched = result.matched
        outcome.match = result.match
        outcome.match_created = result.created

    elif direction is Direction.UP:
        await _insert_or_fail(
            db,
            MaybeEntry(user_id=actor_id, target_id=target_id, created_at=now),
            "Profile is already in your maybe list",
        )
        await _remember_last_swipe(db, actor_id, direction, target_id, now)
        await db.commit()
        logger.info("User %s added %s to maybe list", actor_id, target_id)

    else:
        # Свайп влево не отменяется: счётчик и сброс снимка для undo
        await increment_counter(db, target_id, "swipes_left")
        await _forget_last_swipe(db, actor_id)
        await db.commit()
        logger.info("User %s swiped left on %s", actor_id, target_id)

    return outcome
