"""
Message Schemas
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.schemas.user import UserSummary


class MessageCreate(BaseModel):
    """Schema for sending a message."""

    to: uuid.UUID = Field(..., description="Recipient user ID")
    subject: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)


class MessageOut(BaseModel):
    id: int
    sender: UserSummary
    recipient: UserSummary
    subject: str
    content: str
    is_read: bool
    read_at: Optional[datetime] = None
    created_at: datetime

    model_config = {"from_attributes": True}
