"""
Feedback Routes

Course ratings, reviews and their aggregate statistics.
"""

from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import CurrentUser, require_permission
from app.core.database import get_db
from app.models.enums import Difficulty
from app.models.user import User
from app.schemas.feedback import FeedbackCreate, FeedbackResponse, FeedbackStats
from app.services import feedback_service


router = APIRouter(prefix="/feedback", tags=["Feedback"])


@router.post(
    "",
    response_model=FeedbackResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit course feedback",
)
async def submit_feedback(
    data: FeedbackCreate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> FeedbackResponse:
    """
    Rate and review a course. One submission per course.
    
    Raises:
        HTTPException: 404 if the course does not exist.
        HTTPException: 400 if feedback was already submitted.
    """
    return await feedback_service.submit_feedback(current_user, data, db)


@router.get("/my", response_model=List[FeedbackResponse], summary="List my feedback")
async def list_my_feedback(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> List[FeedbackResponse]:
    return await feedback_service.get_user_feedback(current_user, db)


@router.get("/stats", response_model=FeedbackStats, summary="Feedback statistics")
async def feedback_stats(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> FeedbackStats:
    return await feedback_service.get_feedback_stats(db)


@router.get(
    "/course/{product_id}",
    response_model=List[FeedbackResponse],
    summary="List feedback for a course",
)
async def list_course_feedback(
    product_id: int,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> List[FeedbackResponse]:
    return await feedback_service.get_course_feedback(product_id, db)


@router.get("/all", response_model=List[FeedbackResponse], summary="List all feedback")
async def list_all_feedback(
    current_user: Annotated[User, Depends(require_permission("feedback", "list_all"))],
    db: Annotated[AsyncSession, Depends(get_db)],
    product_id: Optional[int] = Query(None, description="Filter by course"),
    rating: Optional[int] = Query(None, ge=1, le=5, description="Filter by rating"),
    difficulty: Optional[Difficulty] = Query(None, description="Filter by difficulty"),
) -> List[FeedbackResponse]:
    return await feedback_service.list_feedback(
        db, product_id=product_id, rating=rating, difficulty=difficulty
    )


@router.delete(
    "/{feedback_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete feedback",
)
async def delete_feedback(
    feedback_id: int,
    current_user: Annotated[User, Depends(require_permission("feedback", "delete"))],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    await feedback_service.delete_feedback(feedback_id, db)
