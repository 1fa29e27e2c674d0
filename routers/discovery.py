import asyncio
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.database import get_db
from core.errors import MatchingError, to_http_exception
from core.security import get_current_user
from models.profile import Profile
from schemas.discovery import CandidateRead, DiscoveryFilter
from schemas.profile import ProfileRead
from services.discovery import find_candidates

router = APIRouter(prefix="/discovery", tags=["discovery"])

logger = logging.getLogger(__name__)


@router.get(
    "",
    response_model=List[CandidateRead],
    summary="Лента кандидатов рядом с точкой",
)
async def discover(
    lat: Optional[float] = Query(None, ge=-90, le=90, description="Широта"),
    lng: Optional[float] = Query(None, ge=-180, le=180, description="Долгота"),
    max_distance: Optional[float] = Query(None, gt=0, description="Радиус, км"),
    min_age: int = Query(18, ge=18),
    max_age: int = Query(100, le=150),
    gender: str = Query("all"),
    interests: Optional[str] = Query(None, description="Интересы через запятую"),
    preferences: str = Query("all"),
    ethnicity: Optional[str] = Query(None),
    education: Optional[str] = Query(None),
    smoking: Optional[bool] = Query(None),
    limit: int = Query(settings.DISCOVERY_PAGE_SIZE, ge=1, le=settings.DISCOVERY_MAX_PAGE_SIZE),
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
) -> List[CandidateRead]:
    flt = DiscoveryFilter(
        lat=lat,
        lng=lng,
        max_distance_km=max_distance,
        min_age=min_age,
        max_age=max_age,
        gender=gender,
        interests=[i.strip() for i in interests.split(",") if i.strip()] if interests else [],
        preference=preferences,
        ethnicity=ethnicity,
        education=education,
        smoking=smoking,
        page_size=limit,
    )

    try:
        candidates = await asyncio.wait_for(
            find_candidates(db, current_user.id, flt),
            timeout=settings.DISCOVERY_TIMEOUT_SECONDS,
        )
    except MatchingError as exc:
        raise to_http_exception(exc)
    except asyncio.TimeoutError:
        logger.warning("Discovery for user %s timed out", current_user.id)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Discovery timed out"
        )

    return [
        CandidateRead(
            **ProfileRead.model_validate(c.profile).model_dump(),
            distance_km=round(c.distance_km, 3),
            boosted=c.boosted,
        )
        for c in candidates
    ]
