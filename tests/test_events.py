import logging

from services.events import (
    FanOutEventPublisher, InMemoryEventPublisher, LoggingEventPublisher, MatchCreatedEvent,
    build_publisher,
)


class _Broken:
    async def publish(self, event):
        raise RuntimeError("transport down")


class _Recorder:
    def __init__(self):
        self.events = []

    async def publish(self, event):
        self.events.append(event)


async def test_buffer_drops_oldest_when_full():
    buffer = InMemoryEventPublisher(maxsize=2)
    for i in range(3):
        await buffer.publish(MatchCreatedEvent(pair=(i, i + 1), match_id=i))

    events = buffer.drain()
    assert [e.match_id for e in events] == [1, 2]


async def test_fan_out_survives_failing_publisher():
    buffer = InMemoryEventPublisher()
    publisher = FanOutEventPublisher(_Broken(), buffer)

    await publisher.publish(MatchCreatedEvent(pair=(1, 2), match_id=7))

    event = await buffer.get()
    assert event.pair == (1, 2)


async def test_app_publisher_has_no_unread_buffer(caplog):
    publisher = build_publisher()
    assert [type(p) for p in publisher.publishers] == [LoggingEventPublisher]

    with caplog.at_level(logging.INFO, logger="services.events"):
        for i in range(2000):
            await publisher.publish(MatchCreatedEvent(pair=(i, i + 1), match_id=i))

    assert not [r for r in caplog.records if r.levelno >= logging.WARNING]


async def test_app_publisher_forwards_to_telegram():
    telegram = _Recorder()
    publisher = build_publisher(telegram)

    await publisher.publish(MatchCreatedEvent(pair=(3, 4), match_id=1))

    assert [e.match_id for e in telegram.events] == [1]
