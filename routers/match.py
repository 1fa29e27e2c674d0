# routers/match.py

from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.security import get_current_user
from models.match import Match as MatchModel
from models.profile import Profile
from schemas.like import MatchRead, MatchWithProfile
from schemas.profile import ProfileRead

router = APIRouter(prefix="/matches", tags=["matches"])


@router.get(
    "",
    response_model=List[MatchWithProfile],
    summary="Список пользователей, с которыми у вас совпадения"
)
async def get_my_matches(
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
) -> List[MatchWithProfile]:
    # Ищем все матчи, где текущий пользователь — участник
    stmt = (
        select(MatchModel)
        .where(
            or_(
                MatchModel.user1_id == current_user.id,
                MatchModel.user2_id == current_user.id,
            )
        )
        .order_by(MatchModel.created_at.desc())
    )
    result = await db.execute(stmt)
    matches = result.scalars().all()

    out: List[MatchWithProfile] = []
    for match in matches:
        other = await db.get(Profile, match.other(current_user.id))
        if not other or other.deleted_at is not None:
            continue
        out.append(MatchWithProfile(
            match=MatchRead.model_validate(match),
            profile=ProfileRead.model_validate(other),
        ))
    return out
