"""
Feedback Service

Course ratings and reviews, one per (user, course).
"""

import logging
import uuid
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import ActivityAction, Difficulty
from app.models.feedback import Feedback
from app.models.product import Product
from app.models.user import User
from app.schemas.feedback import FeedbackCreate, FeedbackStats
from app.services import activity_service


logger = logging.getLogger(__name__)

ALREADY_SUBMITTED = "You have already submitted feedback for this course"


async def get_feedback_by_id(feedback_id: int, db: AsyncSession) -> Feedback:
    result = await db.execute(
        select(Feedback)
        .where(Feedback.id == feedback_id)
        .execution_options(populate_existing=True)
    )
    feedback = result.scalar_one_or_none()
    if not feedback:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Feedback not found",
        )
    return feedback


async def find_feedback(db: AsyncSession, user_id: uuid.UUID, product_id: int) -> Optional[int]:
    """Id of this user's feedback on a course, if any."""
    result = await db.execute(
        select(Feedback.id).where(Feedback.user_id == user_id, Feedback.product_id == product_id)
    )
    return result.scalar_one_or_none()


async def submit_feedback(user: User, data: FeedbackCreate, db: AsyncSession) -> Feedback:
    """
    Store feedback for a course.
    
    Raises:
        HTTPException: 404 if the course does not exist.
        HTTPException: 400 if this user already reviewed it.
    """
    user_id = user.id
    product = await db.get(Product, data.product_id)
    if product is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Course not found",
        )
    product_name = product.name

    if await find_feedback(db, user_id, data.product_id) is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=ALREADY_SUBMITTED,
        )

    feedback = Feedback(
        user_id=user_id,
        product_id=data.product_id,
        rating=data.rating,
        difficulty=data.difficulty,
        content=data.content,
    )
    db.add(feedback)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=ALREADY_SUBMITTED,
        )

    feedback_id = feedback.id
    await activity_service.log_activity(
        db,
        user_id,
        ActivityAction.FEEDBACK_SUBMITTED,
        f"Submitted feedback for course: {product_name}",
        {
            "product_id": data.product_id,
            "product_name": product_name,
            "rating": data.rating,
            "difficulty": data.difficulty.value,
        },
    )

    return await get_feedback_by_id(feedback_id, db)


async def get_user_feedback(user: User, db: AsyncSession) -> List[Feedback]:
    result = await db.execute(
        select(Feedback)
        .where(Feedback.user_id == user.id)
        .order_by(Feedback.created_at.desc(), Feedback.id.desc())
    )
    return list(result.scalars().all())


async def get_course_feedback(product_id: int, db: AsyncSession) -> List[Feedback]:
    result = await db.execute(
        select(Feedback)
        .where(Feedback.product_id == product_id)
        .order_by(Feedback.created_at.desc(), Feedback.id.desc())
    )
    return list(result.scalars().all())


async def list_feedback(
    db: AsyncSession,
    product_id: Optional[int] = None,
    rating: Optional[int] = None,
    difficulty: Optional[Difficulty] = None,
) -> List[Feedback]:
    """All feedback, optionally filtered, newest first."""
    query = select(Feedback)
    if product_id is not None:
        query = query.where(Feedback.product_id == product_id)
    if rating is not None:
        query = query.where(Feedback.rating == rating)
    if difficulty is not None:
        query = query.where(Feedback.difficulty == difficulty)

    result = await db.execute(query.order_by(Feedback.created_at.desc(), Feedback.id.desc()))
    return list(result.scalars().all())


async def delete_feedback(feedback_id: int, db: AsyncSession) -> None:
    feedback = await get_feedback_by_id(feedback_id, db)
    await db.delete(feedback)
    await db.commit()


async def get_feedback_stats(db: AsyncSession) -> FeedbackStats:
    """
    Aggregate over all feedback.
    
    Every rating 1-5 and every difficulty appears in the distributions, with
    zero when unused. The average is rounded to one decimal.
    """
    total, average = (
        await db.execute(select(func.count(Feedback.id), func.avg(Feedback.rating)))
    ).one()

    rating_rows = await db.execute(
        select(Feedback.rating, func.count(Feedback.id)).group_by(Feedback.rating)
    )
    rating_distribution = {rating: 0 for rating in range(1, 6)}
    for rating, count in rating_rows.all():
        rating_distribution[rating] = count

    difficulty_rows = await db.execute(
        select(Feedback.difficulty, func.count(Feedback.id)).group_by(Feedback.difficulty)
    )
    difficulty_distribution = {difficulty.value: 0 for difficulty in Difficulty}
    for difficulty, count in difficulty_rows.all():
        difficulty_distribution[Difficulty(difficulty).value] = count

    return FeedbackStats(
        total_feedback=total or 0,
        average_rating=round(float(average), 1) if average is not None else 0.0,
        rating_distribution=rating_distribution,
        difficulty_distribution=difficulty_distribution,
    )
