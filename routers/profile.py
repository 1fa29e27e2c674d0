from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.errors import MatchingError, to_http_exception
from core.security import get_current_user
from models.profile import Profile
from schemas.profile import (
    BoostResponse, HiatusResponse, ProfileCreate, ProfileRead, ProfileStats, ProfileUpdate,
)
from services import profiles as profile_service

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.post(
    "",
    response_model=ProfileRead,
    status_code=status.HTTP_201_CREATED,
    summary="Зарегистрировать профиль",
)
async def register(
    payload: ProfileCreate,
    db: AsyncSession = Depends(get_db),
) -> ProfileRead:
    try:
        profile = await profile_service.create_profile(db, payload.model_dump())
    except MatchingError as exc:
        raise to_http_exception(exc)
    return ProfileRead.model_validate(profile)


@router.get("/me", response_model=ProfileRead, summary="Мой профиль")
async def read_me(current_user: Profile = Depends(get_current_user)) -> ProfileRead:
    return ProfileRead.model_validate(current_user)


@router.patch("/me", response_model=ProfileRead, summary="Обновить профиль")
async def update_me(
    payload: ProfileUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
) -> ProfileRead:
    changes = payload.model_dump(exclude_unset=True)
    try:
        profile = await profile_service.update_profile(db, current_user.id, changes)
    except MatchingError as exc:
        raise to_http_exception(exc)
    return ProfileRead.model_validate(profile)


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT, summary="Удалить аккаунт")
async def delete_me(
    hard: bool = Query(False, description="Удалить вместе со всеми лайками и матчами"),
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
):
    try:
        await profile_service.delete_profile(db, current_user.id, hard=hard)
    except MatchingError as exc:
        raise to_http_exception(exc)
    return


@router.post("/me/hiatus", response_model=HiatusResponse, summary="Включить/выключить паузу")
async def toggle_hiatus(
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
) -> HiatusResponse:
    hiatus = await profile_service.toggle_hiatus(db, current_user.id)
    return HiatusResponse(hiatus=hiatus)


@router.post("/me/boost", response_model=BoostResponse, summary="Поднять профиль в ленте на сутки")
async def boost(
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
) -> BoostResponse:
    boosted_until = await profile_service.boost_profile(db, current_user.id)
    return BoostResponse(boosted_until=boosted_until)


@router.get("/me/stats", response_model=ProfileStats, summary="Статистика профиля")
async def stats(
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
) -> ProfileStats:
    return ProfileStats(**await profile_service.get_stats(db, current_user.id))


@router.get("/me/maybe", response_model=List[ProfileRead], summary="Список «может быть»")
async def maybe_list(
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
) -> List[ProfileRead]:
    profiles = await profile_service.list_maybe(db, current_user.id)
    return [ProfileRead.model_validate(p) for p in profiles]
