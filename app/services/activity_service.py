"""
Activity Service

Append-only audit log. Writes are best-effort: a failure to record an
activity is logged and never fails the operation that triggered it.
"""

import logging
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import distinct, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import ActivityAction
from app.models.user_activity import UserActivity
from app.schemas.activity import ActionCount, ActivityStats


logger = logging.getLogger(__name__)


async def log_activity(
    db: AsyncSession,
    user_id: uuid.UUID,
    action: ActivityAction,
    details: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> Optional[UserActivity]:
    """
    Append one activity record and commit it.
    
    Call this after the primary operation has been committed: on failure
    the session is rolled back, which must not undo anything else.
    
    Returns:
        The stored record, or None if the write failed.
    """
    activity = UserActivity(
        user_id=user_id,
        action=action,
        details=details,
        metadata_=metadata or {},
        ip_address=ip_address,
        user_agent=user_agent,
    )
    try:
        db.add(activity)
        await db.commit()
    except SQLAlchemyError:
        logger.exception("Failed to log activity %s for user %s", action.value, user_id)
        await db.rollback()
        return None
    return activity


def _apply_date_range(query, start_date: Optional[datetime], end_date: Optional[datetime]):
    if start_date is not None:
        query = query.where(UserActivity.created_at >= start_date)
    if end_date is not None:
        query = query.where(UserActivity.created_at <= end_date)
    return query


async def list_activities(
    db: AsyncSession,
    user_id: Optional[uuid.UUID] = None,
    action: Optional[ActivityAction] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    limit: int = 100,
) -> List[UserActivity]:
    """
    List activities newest first, optionally filtered.
    
    Args:
        db: Database session.
        user_id: Only this user's activities.
        action: Only this action tag.
        start_date: Inclusive lower bound on created_at.
        end_date: Inclusive upper bound on created_at.
        limit: Maximum rows returned.
    """
    query = select(UserActivity)
    if user_id is not None:
        query = query.where(UserActivity.user_id == user_id)
    if action is not None:
        query = query.where(UserActivity.action == action)
    query = _apply_date_range(query, start_date, end_date)

    result = await db.execute(
        query.order_by(UserActivity.created_at.desc(), UserActivity.id.desc()).limit(limit)
    )
    return list(result.scalars().all())


async def get_activity_stats(
    db: AsyncSession,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
) -> ActivityStats:
    """Totals, distinct users and per-action counts (largest first)."""
    count_col = func.count(UserActivity.id).label("occurrences")
    grouped = _apply_date_range(
        select(UserActivity.action, count_col).group_by(UserActivity.action),
        start_date,
        end_date,
    )
    rows = (await db.execute(grouped.order_by(count_col.desc()))).all()

    total = sum(row.occurrences for row in rows)

    users_query = _apply_date_range(
        select(func.count(distinct(UserActivity.user_id))),
        start_date,
        end_date,
    )
    unique_users = (await db.execute(users_query)).scalar() or 0

    return ActivityStats(
        total_activities=total,
        unique_users=unique_users,
        action_distribution=[ActionCount(action=row.action, count=row.occurrences) for row in rows],
    )
