import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from models.like import Like
from models.match import Match
from services.events import EventPublisher, MatchCreatedEvent

logger = logging.getLogger(__name__)


@dataclass
class MatchResult:
    match: Optional[Match] = None
    created: bool = False

    @property
    def matched(self) -> bool:
        return self.match is not None


def ordered_pair(first_id: int, second_id: int) -> Tuple[int, int]:
    u1, u2 = sorted([first_id, second_id])
    return u1, u2


async def find_match(db: AsyncSession, first_id: int, second_id: int) -> Optional[Match]:
    u1, u2 = ordered_pair(first_id, second_id)
    result = await db.execute(
        select(Match).where(Match.user1_id == u1, Match.user2_id == u2)
    )
    return result.scalar_one_or_none()


async def has_like(db: AsyncSession, liker_id: int, liked_id: int) -> bool:
    result = await db.execute(
        select(Like.id).where(Like.liker_id == liker_id, Like.liked_id == liked_id)
    )
    return result.first() is not None


async def create_match_if_absent(
    db: AsyncSession, first_id: int, second_id: int
) -> Tuple[Match, bool]:
    """
    Создаёт матч для неупорядоченной пары, если его ещё нет.
    Уникальный индекс на (user1_id, user2_id) решает гонку: проигравший
    получает IntegrityError внутри SAVEPOINT и читает уже созданный матч.
    Возвращает (матч, создан_ли_сейчас).
    """
    existing = await find_match(db, first_id, second_id)
    if existing:
        return existing, False

    u1, u2 = ordered_pair(first_id, second_id)
    match = Match(user1_id=u1, user2_id=u2)
    try:
        async with db.begin_nested():
            db.add(match)
            await db.flush()
    except IntegrityError:
        existing = await find_match(db, u1, u2)
        if existing is None:
            raise
        logger.info("Match %s↔%s already created concurrently", u1, u2)
        return existing, False
    return match, True


async def check_reciprocity(
    db: AsyncSession,
    actor_id: int,
    target_id: int,
    publisher: EventPublisher,
) -> MatchResult:
    """
    Вызывается после успешного свайпа вправо actor → target.
    Если есть обратный лайк target → actor, возвращает матч (создаёт при необходимости).
    Событие match_created публикуется только тем вызовом, который создал матч.
    """
    if not await has_like(db, target_id, actor_id):
        return MatchResult()

    match, created = await create_match_if_absent(db, actor_id, target_id)
    await db.commit()

    if created:
        logger.info("Match created between %s and %s", actor_id, target_id)
        await publisher.publish(MatchCreatedEvent(pair=match.pair, match_id=match.id))
    return MatchResult(match=match, created=created)
