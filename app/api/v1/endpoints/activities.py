"""
Activity Routes

Admin access to the audit log.
"""

import uuid
from datetime import datetime
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_permission
from app.core.database import get_db
from app.models.enums import ActivityAction
from app.models.user import User
from app.schemas.activity import ActivityResponse, ActivityStats
from app.services import activity_service


router = APIRouter(prefix="/activities", tags=["Activities"])

AdminUser = Annotated[User, Depends(require_permission("activities", "read"))]


@router.get("", response_model=List[ActivityResponse], summary="List activities")
async def list_activities(
    current_user: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    user_id: Optional[uuid.UUID] = Query(None),
    action: Optional[ActivityAction] = Query(None),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    limit: int = Query(100, ge=1, le=1000),
) -> List[ActivityResponse]:
    """Newest first, optionally filtered by user, action and date range."""
    return await activity_service.list_activities(
        db,
        user_id=user_id,
        action=action,
        start_date=start_date,
        end_date=end_date,
        limit=limit,
    )


@router.get("/stats", response_model=ActivityStats, summary="Activity statistics")
async def activity_stats(
    current_user: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
) -> ActivityStats:
    return await activity_service.get_activity_stats(db, start_date=start_date, end_date=end_date)


@router.get(
    "/user/{user_id}",
    response_model=List[ActivityResponse],
    summary="List one user's activities",
)
async def list_user_activities(
    user_id: uuid.UUID,
    current_user: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    action: Optional[ActivityAction] = Query(None),
    limit: int = Query(50, ge=1, le=1000),
) -> List[ActivityResponse]:
    return await activity_service.list_activities(db, user_id=user_id, action=action, limit=limit)
