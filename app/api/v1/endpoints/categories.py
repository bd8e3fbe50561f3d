"""
Category Routes
"""

from typing import Annotated, List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_permission
from app.core.database import get_db
from app.models.user import User
from app.schemas.product import CategoryCreate, CategoryResponse, CategoryUpdate
from app.services import product_service


router = APIRouter(prefix="/categories", tags=["Categories"])


@router.get(
    "",
    response_model=List[CategoryResponse],
    summary="List categories",
)
async def list_categories(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> List[CategoryResponse]:
    """List categories. The default set is created on first request."""
    return await product_service.list_categories(db)


@router.post(
    "",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a category",
)
async def create_category(
    data: CategoryCreate,
    current_user: Annotated[User, Depends(require_permission("categories", "create"))],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> CategoryResponse:
    return await product_service.create_category(data, db)


@router.put(
    "/{category_id}",
    response_model=CategoryResponse,
    summary="Update a category",
)
async def update_category(
    category_id: int,
    data: CategoryUpdate,
    current_user: Annotated[User, Depends(require_permission("categories", "update"))],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> CategoryResponse:
    return await product_service.update_category(category_id, data, db)


@router.delete(
    "/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a category",
)
async def delete_category(
    category_id: int,
    current_user: Annotated[User, Depends(require_permission("categories", "delete"))],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    await product_service.delete_category(category_id, db)
