import logging
from typing import Callable, Optional

from aiogram import Bot
from aiogram.exceptions import TelegramAPIError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.profile import Profile
from services.events import Event, MatchCreatedEvent, MessageEvent

logger = logging.getLogger(__name__)

MATCH_TEXT = "It's a match! 🔥 You and {name} liked each other, say hi"
MESSAGE_TEXT = "New message from {name} 💬"


class TelegramEventPublisher:
    """Доставляет события пользователям, у которых привязан Telegram."""

    def __init__(self, bot: Bot, session_factory: Callable[[], AsyncSession]):
        self.bot = bot
        self.session_factory = session_factory

    async def publish(self, event: Event) -> None:
        if isinstance(event, MatchCreatedEvent):
            first, second = event.pair
            await self._notify(first, MATCH_TEXT, about=second)
            await self._notify(second, MATCH_TEXT, about=first)
        elif isinstance(event, MessageEvent):
            await self._notify(event.receiver_id, MESSAGE_TEXT, about=event.sender_id)

    async def _notify(self, recipient_id: int, template: str, about: int) -> None:
        async with self.session_factory() as session:
            result = await session.execute(
                select(Profile).where(Profile.id.in_([recipient_id, about]))
            )
            profiles = {p.id: p for p in result.scalars().all()}

        recipient = profiles.get(recipient_id)
        if not recipient or not recipient.telegram_user_id:
            return
        other = profiles.get(about)
        name = other.name if other else "someone"
        await self._send_user_notification(recipient.telegram_user_id, template.format(name=name))

    async def _send_user_notification(self, telegram_user_id: int, text: str) -> None:
        try:
            await self.bot.send_message(chat_id=telegram_user_id, text=text)
        except TelegramAPIError as exc:
            logger.warning(
                "Failed to notify user %s: %s", telegram_user_id, exc, exc_info=exc
            )


def create_telegram_publisher(
    token: Optional[str], session_factory: Callable[[], AsyncSession]
) -> Optional[TelegramEventPublisher]:
    if not token:
        logger.info("TELEGRAM_BOT_TOKEN is not configured, telegram notifications disabled")
        return None
    return TelegramEventPublisher(Bot(token=token), session_factory)
