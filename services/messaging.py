import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import and_, delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import NotMatchedError, SelfActionError, ValidationError
from models.message import Message
from models.profile import Profile
from services.events import EventPublisher, MessageEvent
from services.match_detector import find_match
from services.profiles import get_active_profile
from utils.clock import utcnow

logger = logging.getLogger(__name__)


async def send_message(
    db: AsyncSession,
    sender_id: int,
    receiver_id: int,
    text: str,
    publisher: EventPublisher,
) -> Message:
    if sender_id == receiver_id:
        raise SelfActionError("You cannot message yourself")
    if not text or not text.strip():
        raise ValidationError("Message must contain text")
    await get_active_profile(db, receiver_id)
    if await find_match(db, sender_id, receiver_id) is None:
        raise NotMatchedError()

    message = Message(sender_id=sender_id, receiver_id=receiver_id, text=text.strip())
    db.add(message)
    await db.commit()
    await db.refresh(message)
    logger.info("Message sent from %s to %s", sender_id, receiver_id)

    await publisher.publish(MessageEvent(
        message_id=message.id,
        sender_id=sender_id,
        receiver_id=receiver_id,
        text=message.text,
    ))
    return message


@dataclass
class InboxEntry:
    user_id: int
    name: str
    photo_url: Optional[str]
    last_message: str
    last_message_at: datetime
    unread_count: int


def _between(user_id: int, other_id: int):
    return or_(
        and_(Message.sender_id == user_id, Message.receiver_id == other_id),
        and_(Message.sender_id == other_id, Message.receiver_id == user_id),
    )


async def list_conversation(db: AsyncSession, user_id: int, other_id: int) -> List[Message]:
    """Сообщения пары по времени. Прочитанными не помечает, см. mark_messages_read."""
    result = await db.execute(
        select(Message)
        .where(_between(user_id, other_id))
        .order_by(Message.created_at.asc(), Message.id.asc())
    )
    return list(result.scalars().all())


async def mark_messages_read(
    db: AsyncSession, user_id: int, sender_id: int, now: Optional[datetime] = None
) -> int:
    """Помечает входящие от sender_id прочитанными, возвращает их количество."""
    result = await db.execute(
        select(Message).where(
            Message.sender_id == sender_id,
            Message.receiver_id == user_id,
            Message.is_read.is_(False),
        )
    )
    unread = list(result.scalars().all())
    read_at = now or utcnow()
    for message in unread:
        message.is_read = True
        message.read_at = read_at
    await db.commit()
    logger.info("Messages from %s to %s marked as read: %s", sender_id, user_id, len(unread))
    return len(unread)


async def delete_conversation(db: AsyncSession, user_id: int, other_id: int) -> int:
    result = await db.execute(delete(Message).where(_between(user_id, other_id)))
    await db.commit()
    logger.info("Conversation between %s and %s deleted", user_id, other_id)
    return result.rowcount


async def list_inbox(db: AsyncSession, user_id: int) -> List[InboxEntry]:
    """
    Входящие: по строке на собеседника с последним сообщением и числом
    непрочитанных, свежие диалоги первыми. Удалённые профили пропускаются.
    """
    result = await db.execute(
        select(Message)
        .where(or_(Message.sender_id == user_id, Message.receiver_id == user_id))
        .order_by(Message.created_at.desc(), Message.id.desc())
    )

    last_by_peer: Dict[int, Message] = {}
    unread: Dict[int, int] = {}
    for message in result.scalars():
        peer_id = message.receiver_id if message.sender_id == user_id else message.sender_id
        last_by_peer.setdefault(peer_id, message)
        if message.receiver_id == user_id and not message.is_read:
            unread[peer_id] = unread.get(peer_id, 0) + 1
    if not last_by_peer:
        return []

    peers = await db.execute(
        select(Profile).where(Profile.id.in_(list(last_by_peer)), Profile.deleted_at.is_(None))
    )
    profiles = {p.id: p for p in peers.scalars()}

    return [
        InboxEntry(
            user_id=peer_id,
            name=profiles[peer_id].name,
            photo_url=profiles[peer_id].photo_url,
            last_message=message.text,
            last_message_at=message.created_at,
            unread_count=unread.get(peer_id, 0),
        )
        for peer_id, message in last_by_peer.items()
        if peer_id in profiles
    ]
