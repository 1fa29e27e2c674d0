"""События движка для real-time слоя.

Движок не держит реестр подписчиков: издатель передаётся явно
(через Depends в роутерах или аргументом в сервисах).
"""
import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Protocol, Tuple, Union

from starlette.requests import Request

from utils.clock import utcnow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchCreatedEvent:
    pair: Tuple[int, int]
    match_id: int
    kind: str = "match_created"
    created_at: datetime = field(default_factory=utcnow)


@dataclass(frozen=True)
class MessageEvent:
    message_id: int
    sender_id: int
    receiver_id: int
    text: str
    kind: str = "message"
    created_at: datetime = field(default_factory=utcnow)


Event = Union[MatchCreatedEvent, MessageEvent]


class EventPublisher(Protocol):
    async def publish(self, event: Event) -> None:
        ...


class LoggingEventPublisher:
    """Издатель по умолчанию: только пишет событие в лог."""

    async def publish(self, event: Event) -> None:
        logger.info("Event %s published: %s", event.kind, event)


class InMemoryEventPublisher:
    """Ограниченный буфер событий для встраивания движка и тестов.

    Хост, у которого есть потребитель (websocket, очередь), подставляет его
    через get_event_publisher; при переполнении теряются самые старые события.
    """

    def __init__(self, maxsize: int = 1000):
        self._queue: "asyncio.Queue[Event]" = asyncio.Queue(maxsize=maxsize)

    async def publish(self, event: Event) -> None:
        if self._queue.full():
            dropped = self._queue.get_nowait()
            logger.warning("Event buffer is full, dropping %s", dropped.kind)
        self._queue.put_nowait(event)

    async def get(self) -> Event:
        return await self._queue.get()

    def drain(self) -> List[Event]:
        events: List[Event] = []
        while not self._queue.empty():
            events.append(self._queue.get_nowait())
        return events


class FanOutEventPublisher:
    """Рассылает событие по нескольким издателям, ошибки одного не мешают другим."""

    def __init__(self, *publishers: EventPublisher):
        self.publishers = publishers

    async def publish(self, event: Event) -> None:
        for publisher in self.publishers:
            try:
                await publisher.publish(event)
            except Exception as exc:
                logger.warning(
                    "Publisher %s failed on %s: %s",
                    type(publisher).__name__,
                    event.kind,
                    exc,
                    exc_info=exc,
                )


def build_publisher(telegram_publisher: Optional[EventPublisher] = None) -> EventPublisher:
    """Собирает издателя приложения: лог и, если настроен бот, Telegram."""
    publishers: List[EventPublisher] = [LoggingEventPublisher()]
    if telegram_publisher is not None:
        publishers.append(telegram_publisher)
    return FanOutEventPublisher(*publishers)


def get_event_publisher(request: Request) -> EventPublisher:
    """Depends(get_event_publisher): издатель, собранный при старте приложения."""
    publisher = getattr(request.app.state, "event_publisher", None)
    if publisher is None:
        return LoggingEventPublisher()
    return publisher
