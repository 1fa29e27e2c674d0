from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from schemas.profile import ProfileRead


class SwipeRequest(BaseModel):
    target_id: int = Field(..., description="ID профиля, который свайпают")
    direction: str = Field(..., description="'right', 'left'/'skip' или 'up'/'maybe'")
    super_like: bool = Field(False, description="Суперлайк (только для 'right')")


class MatchRead(BaseModel):
    id: int
    user1_id: int
    user2_id: int
    created_at: datetime

    class Config:
        from_attributes = True


class SwipeResponse(BaseModel):
    direction: str
    target_id: int
    matched: bool
    match: Optional[MatchRead] = None


class UndoResponse(BaseModel):
    direction: str
    restored_target_id: int


class MatchWithProfile(BaseModel):
    match: MatchRead
    profile: ProfileRead
