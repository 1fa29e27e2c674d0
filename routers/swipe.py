from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.errors import MatchingError, to_http_exception
from core.security import get_current_user
from models.profile import Profile
from schemas.like import MatchRead, SwipeRequest, SwipeResponse, UndoResponse
from services.events import EventPublisher, get_event_publisher
from services.swipe_ledger import record_swipe
from services.undo_window import undo_last_swipe

router = APIRouter(prefix="/swipes", tags=["swipes"])


@router.post(
    "",
    response_model=SwipeResponse,
    status_code=status.HTTP_200_OK,
    summary="Свайпнуть профиль и узнать, образовался ли матч",
)
async def swipe(
    payload: SwipeRequest,
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
    publisher: EventPublisher = Depends(get_event_publisher),
) -> SwipeResponse:
    try:
        outcome = await record_swipe(
            db,
            current_user.id,
            payload.target_id,
            payload.direction,
            publisher,
            super_like=payload.super_like,
        )
    except MatchingError as exc:
        raise to_http_exception(exc)

    return SwipeResponse(
        direction=outcome.direction.value,
        target_id=outcome.target_id,
        matched=outcome.matched,
        match=MatchRead.model_validate(outcome.match) if outcome.match else None,
    )


@router.post(
    "/undo",
    response_model=UndoResponse,
    summary="Отменить последний свайп (в течение суток)",
)
async def undo(
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
) -> UndoResponse:
    try:
        result = await undo_last_swipe(db, current_user.id)
    except MatchingError as exc:
        raise to_http_exception(exc)
    return UndoResponse(
        direction=result.direction.value,
        restored_target_id=result.restored_target_id,
    )
