"""Лента кандидатов: фильтры по атрибутам + поиск ближайших в радиусе."""
import itertools
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterator, List, Optional

from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.errors import InvalidFilterError
from models.profile import Profile
from schemas.discovery import DiscoveryFilter
from services.profiles import increment_counter
from utils.clock import as_utc, utcnow
from utils.geo import bounding_box, distance_km

logger = logging.getLogger(__name__)


@dataclass
class Candidate:
    profile: Profile
    distance_km: float
    boosted: bool

    @property
    def rank(self) -> float:
        if self.boosted:
            return self.distance_km * settings.BOOST_RANK_FACTOR
        return self.distance_km


def _longitude_clause(min_lng: float, max_lng: float):
    # Прямоугольник может пересекать антимеридиан
    if min_lng < -180.0:
        return or_(Profile.longitude >= min_lng + 360.0, Profile.longitude <= max_lng)
    if max_lng > 180.0:
        return or_(Profile.longitude >= min_lng, Profile.longitude <= max_lng - 360.0)
    return and_(Profile.longitude >= min_lng, Profile.longitude <= max_lng)


def build_candidates_query(requester_id: int, flt: DiscoveryFilter, radius_km: float):
    box = bounding_box(flt.lat, flt.lng, radius_km)
    stmt = select(Profile).where(
        Profile.id != requester_id,
        Profile.hiatus.is_(False),
        Profile.deleted_at.is_(None),
        Profile.latitude >= box.min_lat,
        Profile.latitude <= box.max_lat,
        _longitude_clause(box.min_lng, box.max_lng),
        Profile.age >= flt.min_age,
        Profile.age <= flt.max_age,
    )

    if flt.gender and flt.gender != "all":
        stmt = stmt.where(Profile.gender == flt.gender)
    if flt.preference and flt.preference != "all":
        stmt = stmt.where(Profile.preference == flt.preference)
    if flt.ethnicity:
        stmt = stmt.where(Profile.ethnicity == flt.ethnicity)
    if flt.education:
        stmt = stmt.where(Profile.education == flt.education)
    if flt.smoking is not None:
        stmt = stmt.where(Profile.smoking == flt.smoking)
    return stmt


def rank_candidates(
    profiles: List[Profile], flt: DiscoveryFilter, radius_km: float, now: datetime
) -> List[Candidate]:
    wanted_interests = set(flt.interests or [])
    candidates: List[Candidate] = []
    for profile in profiles:
        if wanted_interests and not wanted_interests.intersection(profile.interests or []):
            continue
        distance = distance_km(flt.lat, flt.lng, profile.latitude, profile.longitude)
        if distance > radius_km:
            continue
        boosted = profile.boosted_until is not None and as_utc(profile.boosted_until) > now
        candidates.append(Candidate(profile=profile, distance_km=distance, boosted=boosted))

    # Буст — множитель расстояния; при равенстве выше бустнутый, затем ближний
    candidates.sort(key=lambda c: (c.rank, not c.boosted, c.distance_km, c.profile.id))
    return candidates


async def find_candidates(
    db: AsyncSession,
    requester_id: int,
    flt: DiscoveryFilter,
    now: Optional[datetime] = None,
) -> Iterator[Candidate]:
    """
    Возвращает одноразовый итератор кандидатов, отсортированных по близости
    (с учётом буста), не длиннее page_size.
    Уже просмотренные и свайпнутые профили не исключаются.
    Каждый вызов увеличивает счётчик просмотров запрашивающего.
    """
    if flt.lat is None or flt.lng is None:
        raise InvalidFilterError()

    now = now or utcnow()
    radius_km = flt.max_distance_km or settings.DISCOVERY_DEFAULT_RADIUS_KM
    page_size = min(flt.page_size or settings.DISCOVERY_PAGE_SIZE, settings.DISCOVERY_MAX_PAGE_SIZE)

    result = await db.execute(build_candidates_query(requester_id, flt, radius_km))
    candidates = rank_candidates(list(result.scalars().all()), flt, radius_km, now)

    await increment_counter(db, requester_id, "views")
    await db.commit()
    logger.info(
        "User %s discovery: %s candidates within %.1f km", requester_id, len(candidates), radius_km
    )
    return itertools.islice(iter(candidates), page_size)
