# schemas/profile.py
from typing import Optional, List
from datetime import datetime

from pydantic import BaseModel, Field


class ProfileBase(BaseModel):
    name: str = Field(..., max_length=100, description="Имя пользователя")
    bio: Optional[str] = Field(None, max_length=100, description="О себе")
    prompt: Optional[str] = Field(None, max_length=50, description="Подпись к анкете")
    photo_url: Optional[str] = Field(None, description="URL главного фото")
    age: int = Field(..., ge=18, description="Возраст")
    gender: str = Field(..., description="Пол: 'male', 'female', 'nonbinary'")
    interests: List[str] = Field([], description="Интересы")
    preference: str = Field("casual", description="Тип отношений: 'long-term', 'casual', 'intimacy'")
    ethnicity: Optional[str] = None
    education: Optional[str] = None
    smoking: bool = False


class ProfileCreate(ProfileBase):
    email: str = Field(
        ..., max_length=255, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$", description="Email для входа"
    )
    latitude: float = Field(..., ge=-90, le=90, description="Широта")
    longitude: float = Field(..., ge=-180, le=180, description="Долгота")
    telegram_user_id: Optional[int] = Field(None, description="Telegram ID для уведомлений")


class ProfileRead(ProfileBase):
    id: int
    latitude: float
    longitude: float
    hiatus: bool
    boosted_until: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=100)
    bio: Optional[str] = Field(None, max_length=100)
    prompt: Optional[str] = Field(None, max_length=50)
    photo_url: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    age: Optional[int] = Field(None, ge=18)
    gender: Optional[str] = None
    interests: Optional[List[str]] = None
    preference: Optional[str] = None
    ethnicity: Optional[str] = None
    education: Optional[str] = None
    smoking: Optional[bool] = None
    telegram_user_id: Optional[int] = None


class ProfileStats(BaseModel):
    views: int
    swipes_right: int
    swipes_left: int
    super_likes: int
    matches: int
    avg_response_minutes: float
    ghosted_count: int


class HiatusResponse(BaseModel):
    hiatus: bool


class BoostResponse(BaseModel):
    boosted_until: datetime
