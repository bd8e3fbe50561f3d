"""
Message Routes

Direct messaging. Users and managers write to admins; admins write to
users and managers.
"""

from typing import Annotated, List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import CurrentUser
from app.core.database import get_db
from app.schemas.message import MessageCreate, MessageOut
from app.schemas.user import UserSummary
from app.services import message_service


router = APIRouter(prefix="/messages", tags=["Messages"])


@router.get("/users", response_model=List[UserSummary], summary="Users I can message")
async def list_messageable_users(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> List[UserSummary]:
    return await message_service.list_messageable_users(current_user, db)


@router.post(
    "",
    response_model=MessageOut,
    status_code=status.HTTP_201_CREATED,
    summary="Send a message",
)
async def send_message(
    data: MessageCreate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> MessageOut:
    """
    Send a message.
    
    Raises:
        HTTPException: 404 if the recipient does not exist.
        HTTPException: 403 if the sender's role may not message the recipient.
    """
    return await message_service.send_message(current_user, data, db)


@router.get("/received", response_model=List[MessageOut], summary="Inbox")
async def list_received(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    unread_only: bool = Query(False, description="Only unread messages"),
) -> List[MessageOut]:
    return await message_service.get_received(current_user, db, unread_only=unread_only)


@router.get("/sent", response_model=List[MessageOut], summary="Sent messages")
async def list_sent(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> List[MessageOut]:
    return await message_service.get_sent(current_user, db)


@router.get("/{message_id}", response_model=MessageOut, summary="Read a message")
async def get_message(
    message_id: int,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> MessageOut:
    """Sender or recipient only; the recipient opening it marks it read."""
    return await message_service.open_message(message_id, current_user, db)


@router.put("/{message_id}/read", response_model=MessageOut, summary="Mark as read")
async def mark_as_read(
    message_id: int,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> MessageOut:
    return await message_service.mark_as_read(message_id, current_user, db)


@router.delete(
    "/{message_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a message",
)
async def delete_message(
    message_id: int,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    await message_service.delete_message(message_id, current_user, db)
