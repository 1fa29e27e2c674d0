# utils/seed_db.py
import asyncio
import logging
import random
from datetime import timedelta

from core.database import AsyncSessionLocal
from core.errors import DuplicateActionError
from models.profile import Profile
from services.events import LoggingEventPublisher
from services.swipe_ledger import record_swipe
from utils.clock import utcnow

log = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO)

# Константы для семплов
NUM_PROFILES = 30
NUM_SWIPES = 120
CENTER = (40.7128, -74.0060)
SPREAD_DEG = 0.3

NAMES = [
    "Alex", "Sam", "Jordan", "Taylor", "Morgan", "Casey", "Jamie", "Reese", "Drew", "Quinn",
    "Riley", "Avery", "Cameron", "Logan", "Hayden", "Peyton", "Skyler", "Dakota", "Emerson", "Kai"
]
GENDERS = ["male", "female", "nonbinary"]
PREFERENCES = ["long-term", "casual", "intimacy"]
INTERESTS = ["hiking", "coffee", "books", "cooking", "travel", "music", "jazz", "chess", "art"]
BIO_TEMPLATES = [
    "Love hiking and outdoor adventures.",
    "Coffee fanatic and book lover.",
    "Tech enthusiast and amateur chef.",
    "Travel addict exploring the world.",
    "Music is life. Always at concerts.",
]


def _random_profile(n: int) -> Profile:
    now = utcnow()
    return Profile(
        email=f"seed{n}_{random.randint(1000, 9999)}@example.com",
        name=random.choice(NAMES),
        bio=random.choice(BIO_TEMPLATES),
        latitude=round(CENTER[0] + random.uniform(-SPREAD_DEG, SPREAD_DEG), 6),
        longitude=round(CENTER[1] + random.uniform(-SPREAD_DEG, SPREAD_DEG), 6),
        age=random.randint(18, 55),
        gender=random.choice(GENDERS),
        interests=random.sample(INTERESTS, k=random.randint(1, 4)),
        preference=random.choice(PREFERENCES),
        smoking=random.random() < 0.2,
        boosted_until=(now + timedelta(hours=12)) if random.random() < 0.1 else None,
    )


async def seed():
    publisher = LoggingEventPublisher()
    async with AsyncSessionLocal() as session:
        profiles = [_random_profile(n) for n in range(NUM_PROFILES)]
        session.add_all(profiles)
        await session.commit()
        ids = [p.id for p in profiles]

        matches = 0
        for _ in range(NUM_SWIPES):
            actor, target = random.sample(ids, 2)
            direction = random.choices(["right", "left", "up"], weights=[5, 4, 1])[0]
            try:
                outcome = await record_swipe(session, actor, target, direction, publisher)
            except DuplicateActionError:
                continue
            matches += int(outcome.match_created)

    log.info("Seeded %s profiles, %s swipes, %s matches", NUM_PROFILES, NUM_SWIPES, matches)


if __name__ == "__main__":
    asyncio.run(seed())
