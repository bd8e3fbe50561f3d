"""
Enrollment Routes

Enrolling in courses and reporting progress.
"""

from typing import Annotated, List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import CurrentUser
from app.core.database import get_db
from app.schemas.enrollment import EnrollmentCreate, EnrollmentResponse, EnrollmentUpdate
from app.services import enrollment_service


router = APIRouter(prefix="/enrollments", tags=["Enrollments"])


@router.post(
    "",
    response_model=EnrollmentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Enroll in a course",
)
async def enroll(
    data: EnrollmentCreate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> EnrollmentResponse:
    """
    Enroll the current user in a course.
    
    Raises:
        HTTPException: 404 if the course does not exist.
        HTTPException: 400 if already enrolled.
    """
    return await enrollment_service.enroll(current_user.id, data.product_id, db)


@router.get(
    "",
    response_model=List[EnrollmentResponse],
    summary="List my enrollments",
)
async def list_my_enrollments(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> List[EnrollmentResponse]:
    return await enrollment_service.get_user_enrollments(current_user, db)


@router.get(
    "/completed",
    response_model=List[EnrollmentResponse],
    summary="List my completed courses",
)
async def list_completed(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> List[EnrollmentResponse]:
    return await enrollment_service.get_user_enrollments(current_user, db, completed_only=True)


@router.get(
    "/product/{product_id}",
    response_model=EnrollmentResponse,
    summary="Get my enrollment in a course",
)
async def get_for_product(
    product_id: int,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> EnrollmentResponse:
    return await enrollment_service.get_enrollment_for_product(current_user, product_id, db)


@router.get(
    "/{enrollment_id}",
    response_model=EnrollmentResponse,
    summary="Get an enrollment",
)
async def get_enrollment(
    enrollment_id: int,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> EnrollmentResponse:
    """Owner or admin only."""
    enrollment = await enrollment_service.get_enrollment_by_id(enrollment_id, db)
    enrollment_service.ensure_can_access(enrollment, current_user, action="view")
    return enrollment


@router.put(
    "/{enrollment_id}",
    response_model=EnrollmentResponse,
    summary="Report progress",
)
async def update_enrollment(
    enrollment_id: int,
    data: EnrollmentUpdate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> EnrollmentResponse:
    """
    Update progress (clamped to 0-100) and/or the completed flag.
    
    Raises:
        HTTPException: 404 if not found.
        HTTPException: 403 if neither the owner nor an admin.
    """
    return await enrollment_service.report_progress(
        enrollment_id,
        current_user,
        db,
        progress=data.progress,
        completed=data.completed,
    )
