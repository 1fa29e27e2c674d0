from typing import List, Optional

from pydantic import BaseModel, Field

from schemas.profile import ProfileRead


class DiscoveryFilter(BaseModel):
    lat: Optional[float] = Field(None, ge=-90, le=90, description="Широта центра поиска")
    lng: Optional[float] = Field(None, ge=-180, le=180, description="Долгота центра поиска")
    max_distance_km: Optional[float] = Field(None, gt=0, description="Радиус поиска, км")
    min_age: int = Field(18, ge=18, description="Минимальный возраст")
    max_age: int = Field(100, le=150, description="Максимальный возраст")
    gender: Optional[str] = Field("all", description="Пол или 'all'")
    interests: List[str] = Field([], description="Интересы, достаточно одного совпадения")
    preference: Optional[str] = Field("all", description="Тип отношений или 'all'")
    ethnicity: Optional[str] = None
    education: Optional[str] = None
    smoking: Optional[bool] = None
    page_size: Optional[int] = Field(None, ge=1, description="Размер страницы")


class CandidateRead(ProfileRead):
    distance_km: float = Field(..., description="Расстояние до кандидата, км")
    boosted: bool = Field(False, description="Профиль сейчас под бустом")
