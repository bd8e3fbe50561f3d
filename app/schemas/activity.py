"""
Activity Schemas
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from app.models.enums import ActivityAction
from app.schemas.user import UserSummary


class ActivityResponse(BaseModel):
    id: int
    user_id: Optional[uuid.UUID] = None
    user: Optional[UserSummary] = None
    action: ActivityAction
    details: Optional[str] = None
    metadata: dict = Field(default_factory=dict, validation_alias="metadata_")
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class ActionCount(BaseModel):
    action: ActivityAction
    count: int


class ActivityStats(BaseModel):
    total_activities: int
    unique_users: int
    action_distribution: List[ActionCount]
