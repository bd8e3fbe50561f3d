"""
Product Routes

Course catalogue endpoints. Reads are public; writes are admin-only.
"""

from typing import Annotated, Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_permission
from app.core.database import get_db
from app.models.user import User
from app.schemas.product import (
    ProductCreate,
    ProductResponse,
    ProductUpdate,
    ProductWithEnrollments,
)
from app.services import product_service


router = APIRouter(prefix="/products", tags=["Products"])


@router.get(
    "",
    response_model=None,
    summary="List courses",
)
async def list_products(
    db: Annotated[AsyncSession, Depends(get_db)],
    category: Optional[int] = Query(None, description="Filter by category ID"),
    featured: Optional[bool] = Query(None, description="Only featured (or non-featured) courses"),
    include_enrollments: bool = Query(False, description="Attach enrollment_count to each course"),
) -> List[Dict[str, Any]]:
    """
    List courses, optionally filtered by category and featured flag.
    
    With `include_enrollments=true` every course carries the number of
    enrollments it has.
    """
    products = await product_service.list_products(db, category_id=category, featured=featured)
    if not include_enrollments:
        return [ProductResponse.model_validate(product).model_dump(mode="json") for product in products]

    counts = await product_service.count_enrollments(db, [product.id for product in products])
    return [
        ProductWithEnrollments.model_validate(product).model_copy(
            update={"enrollment_count": counts[product.id]}
        ).model_dump(mode="json")
        for product in products
    ]


@router.get(
    "/slug/{slug}",
    response_model=ProductResponse,
    summary="Get a course by slug",
)
async def get_product_by_slug(
    slug: str,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ProductResponse:
    return await product_service.get_product_by_slug(slug, db)


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    summary="Get a course",
)
async def get_product(
    product_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ProductResponse:
    return await product_service.get_product_by_id(product_id, db)


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a course",
)
async def create_product(
    data: ProductCreate,
    current_user: Annotated[User, Depends(require_permission("products", "create"))],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ProductResponse:
    """
    Create a course.
    
    **Flow:**
    1. Check the category exists
    2. Use the given slug, or derive one from the name (base, base-1, ...)
    3. Insert; a slug taken concurrently is retried with the next suffix
    
    Raises:
        HTTPException: 404 if the category does not exist.
        HTTPException: 400 if an explicit slug is already taken.
    """
    return await product_service.create_product(data, db)


@router.put(
    "/{product_id}",
    response_model=ProductResponse,
    summary="Update a course",
)
async def update_product(
    product_id: int,
    data: ProductUpdate,
    current_user: Annotated[User, Depends(require_permission("products", "update"))],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ProductResponse:
    return await product_service.update_product(product_id, data, db)


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a course",
)
async def delete_product(
    product_id: int,
    current_user: Annotated[User, Depends(require_permission("products", "delete"))],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    await product_service.delete_product(product_id, db)
