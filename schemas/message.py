from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class MessageCreate(BaseModel):
    receiver_id: int = Field(..., description="Кому")
    text: str = Field(..., max_length=2000, description="Текст сообщения")


class MessageRead(BaseModel):
    id: int
    sender_id: int
    receiver_id: int
    text: str
    is_read: bool
    read_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True


class InboxEntryRead(BaseModel):
    user_id: int
    name: str
    photo_url: Optional[str] = None
    last_message: str
    last_message_at: datetime
    unread_count: int

    class Config:
        from_attributes = True


class MarkReadResponse(BaseModel):
    marked: int
