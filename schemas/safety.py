from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class SafetyReportCreate(BaseModel):
    reported_user_id: int = Field(..., description="На кого жалоба")
    reason: str = Field(..., min_length=1, max_length=500, description="Причина")
    location: Optional[str] = Field(None, max_length=128, description="Где произошло")


class SafetyReportRead(BaseModel):
    id: int
    reporter_id: int
    reported_id: int
    reason: str
    location: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
