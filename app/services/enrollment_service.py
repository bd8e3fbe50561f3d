"""
Enrollment Service

Business logic for enrolling in courses and reporting progress.

Lifecycle: not enrolled -> enrolled -> completed. A user holds at most one
enrollment per course; a second enrollment is rejected, never merged.
"""

import logging
import uuid
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import policy
from app.models.enrollment import Enrollment
from app.models.enums import ActivityAction
from app.models.product import Product
from app.models.user import User
from app.services import activity_service


logger = logging.getLogger(__name__)

PROGRESS_MIN = 0
PROGRESS_MAX = 100

ALREADY_ENROLLED = "You are already enrolled in this course"


def clamp_progress(progress: int) -> int:
    """Clamp a reported progress value into [0, 100]."""
    return max(PROGRESS_MIN, min(PROGRESS_MAX, progress))


async def get_enrollment_by_id(enrollment_id: int, db: AsyncSession) -> Enrollment:
    """
    Get an enrollment with its course loaded.
    
    Raises:
        HTTPException: 404 if the enrollment does not exist.
    """
    result = await db.execute(
        select(Enrollment)
        .where(Enrollment.id == enrollment_id)
        .execution_options(populate_existing=True)
    )
    enrollment = result.scalar_one_or_none()

    if not enrollment:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Enrollment not found",
        )

    return enrollment


def ensure_can_access(enrollment: Enrollment, user: User, action: str = "update") -> None:
    """
    Owners may act on their own enrollment; admins on anyone's.
    
    Raises:
        HTTPException: 403 for anyone else.
    """
    if enrollment.user_id == user.id:
        return
    if policy.is_allowed(user.role, "enrollments", "manage_any"):
        return
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail=f"Not authorized to {action} this enrollment",
    )


async def find_enrollment(
    db: AsyncSession,
    user_id: uuid.UUID,
    product_id: int,
) -> Optional[Enrollment]:
    """The enrollment for a (user, course) pair, if any."""
    result = await db.execute(
        select(Enrollment).where(
            Enrollment.user_id == user_id,
            Enrollment.product_id == product_id,
        )
    )
    return result.scalar_one_or_none()


async def enroll(
    user_id: uuid.UUID,
    product_id: int,
    db: AsyncSession,
    source: Optional[str] = None,
    extra_metadata: Optional[dict] = None,
) -> Enrollment:
    """
    Enroll a user in a course.
    
    Flow:
    1. Verify the course exists
    2. Reject if the pair is already enrolled
    3. Insert; the unique (user_id, product_id) constraint rejects a
       concurrent duplicate that slipped past step 2
    4. Append a course_enrolled activity
    
    Args:
        user_id: Enrolling user.
        product_id: Course ID.
        db: Database session.
        source: Optional suffix for the activity text (e.g. "via order").
        extra_metadata: Extra activity metadata (e.g. the order id).
        
    Raises:
        HTTPException: 404 if the course does not exist.
        HTTPException: 400 if already enrolled.
    """
    product = await db.get(Product, product_id)
    if product is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Course not found",
        )

    if await find_enrollment(db, user_id, product_id) is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=ALREADY_ENROLLED,
        )

    enrollment = Enrollment(user_id=user_id, product_id=product_id, progress=0, completed=False)
    db.add(enrollment)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.info("Concurrent enrollment rejected for user %s, product %s", user_id, product_id)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=ALREADY_ENROLLED,
        )

    enrollment_id = enrollment.id
    product_name = product.name
    details = f"Enrolled in course: {product_name}"
    if source:
        details = f"{details} ({source})"
    await activity_service.log_activity(
        db,
        user_id,
        ActivityAction.COURSE_ENROLLED,
        details,
        {"product_id": product_id, "product_name": product_name, **(extra_metadata or {})},
    )

    return await get_enrollment_by_id(enrollment_id, db)


async def report_progress(
    enrollment_id: int,
    user: User,
    db: AsyncSession,
    progress: Optional[int] = None,
    completed: Optional[bool] = None,
) -> Enrollment:
    """
    Update progress and/or the completion flag.
    
    Progress is clamped into [0, 100]. `completed` is set independently of
    progress. A course_completed activity is appended only when this call
    moves `completed` from False to True.
    
    Raises:
        HTTPException: 404 if not found, 403 if neither owner nor admin.
    """
    enrollment = await get_enrollment_by_id(enrollment_id, db)
    ensure_can_access(enrollment, user)

    if progress is not None:
        enrollment.progress = clamp_progress(progress)

    newly_completed = False
    if completed is not None:
        newly_completed = completed and not enrollment.completed
        enrollment.completed = completed

    user_id = user.id
    product_id = enrollment.product_id
    product_name = enrollment.product.name if enrollment.product else None
    await db.commit()

    if newly_completed:
        await activity_service.log_activity(
            db,
            user_id,
            ActivityAction.COURSE_COMPLETED,
            f"Completed course: {product_name or 'Unknown'}",
            {
                "enrollment_id": enrollment_id,
                "product_id": product_id,
                "product_name": product_name,
            },
        )

    return await get_enrollment_by_id(enrollment_id, db)


async def get_user_enrollments(
    user: User,
    db: AsyncSession,
    completed_only: bool = False,
) -> List[Enrollment]:
    """
    Get a user's enrollments with the course loaded.
    
    All enrollments come newest first; completed ones most recently
    updated first.
    """
    query = select(Enrollment).where(Enrollment.user_id == user.id)
    if completed_only:
        query = query.where(Enrollment.completed.is_(True)).order_by(
            Enrollment.updated_at.desc(), Enrollment.id.desc()
        )
    else:
        query = query.order_by(Enrollment.enrolled_at.desc(), Enrollment.id.desc())

    result = await db.execute(query)
    return list(result.scalars().all())


async def get_enrollment_for_product(
    user: User,
    product_id: int,
    db: AsyncSession,
) -> Enrollment:
    """The caller's enrollment in a course (404 "Not enrolled" otherwise)."""
    enrollment = await find_enrollment(db, user.id, product_id)
    if enrollment is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Not enrolled",
        )
    return enrollment
