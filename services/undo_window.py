import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.errors import NoRecentActionError, NotFoundError, UndoExpiredError
from models.last_swipe import LastSwipeAction
from models.like import Like
from models.maybe import MaybeEntry
from services.swipe_ledger import Direction
from utils.clock import as_utc, utcnow

logger = logging.getLogger(__name__)


@dataclass
class UndoResult:
    direction: Direction
    restored_target_id: int


def undo_window() -> timedelta:
    return timedelta(hours=settings.UNDO_WINDOW_HOURS)


async def _delete_entry(db: AsyncSession, stmt) -> None:
    result = await db.execute(stmt)
    if result.rowcount == 0:
        raise NotFoundError("Swipe entry not found")


async def undo_last_swipe(
    db: AsyncSession, user_id: int, now: Optional[datetime] = None
) -> UndoResult:
    """
    Отменяет последний свайп вправо или «может быть» в пределах окна.
    Отмена одноразовая: снимок удаляется, повторный вызов даёт NoRecentActionError.
    Матч, успевший образоваться, не трогаем.
    """
    now = now or utcnow()
    result = await db.execute(
        select(LastSwipeAction).where(LastSwipeAction.user_id == user_id)
    )
    snapshot = result.scalar_one_or_none()
    if snapshot is None:
        raise NoRecentActionError()

    if now - as_utc(snapshot.created_at) > undo_window():
        raise UndoExpiredError()

    direction = Direction(snapshot.direction)
    target_id = snapshot.target_id

    try:
        if direction is Direction.RIGHT:
            await _delete_entry(
                db, delete(Like).where(Like.liker_id == user_id, Like.liked_id == target_id)
            )
        elif direction is Direction.UP:
            await _delete_entry(
                db,
                delete(MaybeEntry).where(
                    MaybeEntry.user_id == user_id, MaybeEntry.target_id == target_id
                ),
            )
    except NotFoundError:
        # Запись уже удалена (например, вместе с профилем) — итог тот же
        logger.info("Swipe %s→%s already gone, nothing to undo", user_id, target_id)

    await db.delete(snapshot)
    await db.commit()
    logger.info("User %s undid %s swipe on %s", user_id, direction.value, target_id)
    return UndoResult(direction=direction, restored_target_id=target_id)
