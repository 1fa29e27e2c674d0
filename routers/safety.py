from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.errors import MatchingError, to_http_exception
from core.security import get_current_user
from models.profile import Profile
from schemas.safety import SafetyReportCreate, SafetyReportRead
from services.safety import report_profile

router = APIRouter(prefix="/safety", tags=["safety"])


@router.post(
    "/reports",
    response_model=SafetyReportRead,
    status_code=status.HTTP_201_CREATED,
    summary="Пожаловаться на пользователя",
)
async def create_report(
    payload: SafetyReportCreate,
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
) -> SafetyReportRead:
    try:
        report = await report_profile(
            db, current_user.id, payload.reported_user_id, payload.reason, payload.location,
        )
    except MatchingError as exc:
        raise to_http_exception(exc)
    return SafetyReportRead.model_validate(report)
