"""
User Routes

Account administration for managers and admins.
"""

import uuid
from typing import Annotated, List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_permission
from app.core.database import get_db
from app.models.user import User
from app.schemas.user import UserAdminUpdate, UserResponse
from app.services import user_service


router = APIRouter(prefix="/users", tags=["Users"])


@router.get(
    "",
    response_model=List[UserResponse],
    summary="List all users",
)
async def list_users(
    current_user: Annotated[User, Depends(require_permission("users", "list"))],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> List[UserResponse]:
    return await user_service.list_users(db)


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    summary="Get a user",
)
async def get_user(
    user_id: uuid.UUID,
    current_user: Annotated[User, Depends(require_permission("users", "read"))],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserResponse:
    return await user_service.get_user_by_id(user_id, db)


@router.put(
    "/{user_id}",
    response_model=UserResponse,
    summary="Update a user",
)
async def update_user(
    user_id: uuid.UUID,
    data: UserAdminUpdate,
    current_user: Annotated[User, Depends(require_permission("users", "update"))],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserResponse:
    """
    Change name, email, password or role of any account.
    
    Raises:
        HTTPException: 404 if the user does not exist.
        HTTPException: 400 if the email is already in use.
    """
    return await user_service.admin_update_user(user_id, data, db)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a user",
)
async def delete_user(
    user_id: uuid.UUID,
    current_user: Annotated[User, Depends(require_permission("users", "delete"))],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    """Delete an account. Owned rows go with it through ON DELETE CASCADE."""
    await user_service.delete_user(user_id, db)
