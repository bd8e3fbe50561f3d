"""
Message Service

Direct messages between users. Who may write to whom is decided by
app.core.policy.MESSAGE_RECIPIENTS.
"""

import logging
from datetime import datetime, timezone
from typing import List

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import policy
from app.models.enums import ActivityAction
from app.models.message import Message
from app.models.user import User
from app.schemas.message import MessageCreate
from app.services import activity_service


logger = logging.getLogger(__name__)


async def get_message_by_id(message_id: int, db: AsyncSession) -> Message:
    result = await db.execute(
        select(Message)
        .where(Message.id == message_id)
        .execution_options(populate_existing=True)
    )
    message = result.scalar_one_or_none()
    if not message:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Message not found",
        )
    return message


async def list_messageable_users(user: User, db: AsyncSession) -> List[User]:
    """Users the caller may address, excluding themselves, sorted by name."""
    roles = policy.MESSAGE_RECIPIENTS.get(user.role, frozenset())
    if not roles:
        return []

    result = await db.execute(
        select(User)
        .where(User.role.in_(roles), User.id != user.id)
        .order_by(User.name)
    )
    return list(result.scalars().all())


async def send_message(sender: User, data: MessageCreate, db: AsyncSession) -> Message:
    """
    Send a message after checking the role gate.
    
    Raises:
        HTTPException: 404 if the recipient does not exist.
        HTTPException: 403 if the sender's role may not address the recipient's.
    """
    sender_id = sender.id
    sender_role = sender.role
    sender_name = sender.name

    recipient = await db.get(User, data.to)
    if recipient is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Recipient not found",
        )

    if not policy.can_message(sender_role, recipient.role):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=policy.messaging_denial_reason(sender_role),
        )

    recipient_id = recipient.id
    recipient_name = recipient.name

    message = Message(
        sender_id=sender_id,
        recipient_id=recipient_id,
        subject=data.subject,
        content=data.content,
    )
    db.add(message)
    await db.commit()
    message_id = message.id

    await activity_service.log_activity(
        db,
        sender_id,
        ActivityAction.MESSAGE_SENT,
        f"Sent message to {recipient_name}: {data.subject}",
        {"message_id": message_id, "recipient_id": str(recipient_id)},
    )
    await activity_service.log_activity(
        db,
        recipient_id,
        ActivityAction.MESSAGE_RECEIVED,
        f"Received message from {sender_name}: {data.subject}",
        {"message_id": message_id, "sender_id": str(sender_id)},
    )

    return await get_message_by_id(message_id, db)


async def get_received(user: User, db: AsyncSession, unread_only: bool = False) -> List[Message]:
    query = select(Message).where(Message.recipient_id == user.id)
    if unread_only:
        query = query.where(Message.is_read.is_(False))
    result = await db.execute(query.order_by(Message.created_at.desc(), Message.id.desc()))
    return list(result.scalars().all())


async def get_sent(user: User, db: AsyncSession) -> List[Message]:
    result = await db.execute(
        select(Message)
        .where(Message.sender_id == user.id)
        .order_by(Message.created_at.desc(), Message.id.desc())
    )
    return list(result.scalars().all())


def _mark_read(message: Message) -> bool:
    if message.is_read:
        return False
    message.is_read = True
    message.read_at = datetime.now(timezone.utc)
    return True


async def open_message(message_id: int, user: User, db: AsyncSession) -> Message:
    """
    Read one message. Opening it as the recipient marks it read.
    
    Raises:
        HTTPException: 404 if missing, 403 if the caller is neither party.
    """
    message = await get_message_by_id(message_id, db)
    if user.id not in (message.sender_id, message.recipient_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to view this message",
        )

    if message.recipient_id == user.id and _mark_read(message):
        await db.commit()
        message = await get_message_by_id(message_id, db)

    return message


async def mark_as_read(message_id: int, user: User, db: AsyncSession) -> Message:
    """
    Raises:
        HTTPException: 403 unless the caller is the recipient.
    """
    message = await get_message_by_id(message_id, db)
    if message.recipient_id != user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the recipient can mark a message as read",
        )

    if _mark_read(message):
        await db.commit()
    return await get_message_by_id(message_id, db)


async def delete_message(message_id: int, user: User, db: AsyncSession) -> None:
    message = await get_message_by_id(message_id, db)
    if user.id not in (message.sender_id, message.recipient_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to delete this message",
        )
    await db.delete(message)
    await db.commit()
