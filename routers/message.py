from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.errors import MatchingError, to_http_exception
from core.security import get_current_user
from models.profile import Profile
from schemas.message import InboxEntryRead, MarkReadResponse, MessageCreate, MessageRead
from services.events import EventPublisher, get_event_publisher
from services.messaging import (
    delete_conversation, list_conversation, list_inbox, mark_messages_read, send_message,
)

router = APIRouter(prefix="/messages", tags=["messages"])


@router.post(
    "",
    response_model=MessageRead,
    status_code=status.HTTP_201_CREATED,
    summary="Написать пользователю, с которым есть матч",
)
async def create_message(
    payload: MessageCreate,
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
    publisher: EventPublisher = Depends(get_event_publisher),
) -> MessageRead:
    try:
        message = await send_message(db, current_user.id, payload.receiver_id, payload.text, publisher)
    except MatchingError as exc:
        raise to_http_exception(exc)
    return MessageRead.model_validate(message)


# /inbox объявлен раньше /{user_id}
@router.get("/inbox", response_model=List[InboxEntryRead], summary="Список диалогов")
async def inbox(
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
) -> List[InboxEntryRead]:
    entries = await list_inbox(db, current_user.id)
    return [InboxEntryRead.model_validate(e) for e in entries]


@router.get("/{user_id}", response_model=List[MessageRead], summary="Переписка с пользователем")
async def conversation(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
) -> List[MessageRead]:
    messages = await list_conversation(db, current_user.id, user_id)
    return [MessageRead.model_validate(m) for m in messages]


@router.put("/{user_id}/read", response_model=MarkReadResponse, summary="Прочитать входящие")
async def mark_read(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
) -> MarkReadResponse:
    marked = await mark_messages_read(db, current_user.id, user_id)
    return MarkReadResponse(marked=marked)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Удалить переписку")
async def remove_conversation(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
):
    await delete_conversation(db, current_user.id, user_id)
    return
