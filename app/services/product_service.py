"""
Product Service

Business logic for the course catalogue: listing, slug assignment and
category bookkeeping.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

from fastapi import HTTPException, status
from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.category import Category
from app.models.enrollment import Enrollment
from app.models.product import Product
from app.schemas.product import CategoryCreate, CategoryUpdate, ProductCreate, ProductUpdate
from app.services import slug_service


logger = logging.getLogger(__name__)

# Attempts at a generated slug before giving up under heavy contention
SLUG_MAX_ATTEMPTS = 5

DEFAULT_CATEGORIES = [
    {"name": "Technical Skills", "description": "Technical and programming courses"},
    {"name": "Soft Skills", "description": "Interpersonal and communication skills"},
    {"name": "Leadership", "description": "Leadership and management courses"},
    {"name": "Compliance", "description": "Compliance and regulatory training"},
]


# ============== Products ==============

async def get_product_by_id(
    product_id: int,
    db: AsyncSession,
) -> Product:
    """
    Get a specific course by ID.
    
    Raises:
        HTTPException: 404 if course not found.
    """
    result = await db.execute(
        select(Product)
        .where(Product.id == product_id)
        .execution_options(populate_existing=True)
    )
    product = result.scalar_one_or_none()

    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Product not found",
        )

    return product


async def get_product_by_slug(slug: str, db: AsyncSession) -> Product:
    """Get a course by its slug (404 if absent)."""
    result = await db.execute(select(Product).where(Product.slug == slug))
    product = result.scalar_one_or_none()

    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Product not found",
        )

    return product


async def list_products(
    db: AsyncSession,
    category_id: Optional[int] = None,
    featured: Optional[bool] = None,
) -> List[Product]:
    """List courses, optionally filtered by category and featured flag."""
    query = select(Product)
    if category_id is not None:
        query = query.where(Product.category_id == category_id)
    if featured is not None:
        query = query.where(Product.is_featured == featured)

    result = await db.execute(query.order_by(Product.id))
    return list(result.scalars().all())


async def count_enrollments(db: AsyncSession, product_ids: List[int]) -> Dict[int, int]:
    """Enrollment count per product id, with zeros for unenrolled products."""
    counts = {product_id: 0 for product_id in product_ids}
    if not product_ids:
        return counts

    result = await db.execute(
        select(Enrollment.product_id, func.count(Enrollment.id))
        .where(Enrollment.product_id.in_(product_ids))
        .group_by(Enrollment.product_id)
    )
    for product_id, count in result.all():
        counts[product_id] = count
    return counts


async def _ensure_category(db: AsyncSession, category_id: Optional[int]) -> None:
    if category_id is None:
        return
    if await db.get(Category, category_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Category not found",
        )


async def _commit_with_slug(
    db: AsyncSession,
    build: Callable[[], Awaitable[Product]],
    explicit_slug: Optional[str],
    regenerate: bool,
) -> Product:
    """
    Commit the product produced by `build`, assigning a slug when needed.
    
    `build` is called once per attempt because a rollback discards pending
    objects and expires loaded ones. An explicit slug that collides is a
    client error; a generated slug that loses a race against another
    writer is regenerated and retried.
    """
    for attempt in range(1, SLUG_MAX_ATTEMPTS + 1):
        product = await build()
        if explicit_slug:
            product.slug = explicit_slug
        elif regenerate:
            product.slug = await slug_service.generate_unique_slug(
                db, product.name, exclude_id=product.id
            )

        slug = product.slug
        db.add(product)
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            if explicit_slug:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"Slug '{slug}' is already in use",
                )
            if not regenerate:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Course conflicts with an existing record",
                )
            logger.warning(
                "Slug collision on '%s' (attempt %d/%d), retrying",
                slug, attempt, SLUG_MAX_ATTEMPTS,
            )
            continue
        return await get_product_by_id(product.id, db)

    raise HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail="Could not allocate a unique slug, please retry",
    )


async def create_product(data: ProductCreate, db: AsyncSession) -> Product:
    """
    Create a course. The slug is derived from the name unless supplied.
    
    Raises:
        HTTPException: 404 if the category does not exist.
        HTTPException: 400 if an explicit slug is taken.
    """
    await _ensure_category(db, data.category_id)
    fields = data.model_dump(exclude={"slug"})

    async def build() -> Product:
        return Product(**fields)

    return await _commit_with_slug(db, build, data.slug or None, regenerate=True)


async def update_product(
    product_id: int,
    data: ProductUpdate,
    db: AsyncSession,
) -> Product:
    """
    Apply a partial update. A new name without an explicit slug
    regenerates the slug, ignoring this product's current one.
    """
    await get_product_by_id(product_id, db)
    changes: Dict[str, Any] = data.model_dump(exclude_unset=True)

    if "category_id" in changes:
        await _ensure_category(db, changes["category_id"])

    explicit_slug = changes.pop("slug", None)
    regenerate = bool(changes.get("name")) and not explicit_slug
    if changes.get("tags", []) is None:
        changes["tags"] = []

    async def build() -> Product:
        product = await get_product_by_id(product_id, db)
        for field, value in changes.items():
            setattr(product, field, value)
        return product

    return await _commit_with_slug(db, build, explicit_slug, regenerate=regenerate)


async def delete_product(product_id: int, db: AsyncSession) -> None:
    """Delete a course together with its enrollments."""
    product = await get_product_by_id(product_id, db)

    await db.execute(delete(Enrollment).where(Enrollment.product_id == product.id))
    await db.delete(product)
    await db.commit()


async def backfill_missing_slugs(db: AsyncSession) -> List[Tuple[str, str]]:
    """
    Give every product with a NULL or empty slug a unique one.
    
    Returns:
        (name, slug) for each product fixed.
    """
    result = await db.execute(
        select(Product.id)
        .where((Product.slug.is_(None)) | (Product.slug == ""))
        .order_by(Product.id)
    )
    fixed = []
    for product_id in result.scalars().all():
        async def build(product_id: int = product_id) -> Product:
            return await get_product_by_id(product_id, db)

        saved = await _commit_with_slug(db, build, None, regenerate=True)
        fixed.append((saved.name, saved.slug))
    return fixed


# ============== Categories ==============

async def list_categories(db: AsyncSession) -> List[Category]:
    """List categories, seeding the defaults on first use."""
    result = await db.execute(select(Category).order_by(Category.id))
    categories = list(result.scalars().all())
    if categories:
        return categories

    db.add_all(Category(**fields) for fields in DEFAULT_CATEGORIES)
    try:
        await db.commit()
    except IntegrityError:
        # Another request seeded them first
        await db.rollback()

    result = await db.execute(select(Category).order_by(Category.id))
    return list(result.scalars().all())


async def get_category(category_id: int, db: AsyncSession) -> Category:
    category = await db.get(Category, category_id)
    if category is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Category not found",
        )
    return category


async def _commit_category(db: AsyncSession, category: Category) -> Category:
    db.add(category)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Category name already exists",
        )
    await db.refresh(category)
    return category


async def create_category(data: CategoryCreate, db: AsyncSession) -> Category:
    return await _commit_category(db, Category(**data.model_dump()))


async def update_category(category_id: int, data: CategoryUpdate, db: AsyncSession) -> Category:
    category = await get_category(category_id, db)
    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(category, field, value)
    return await _commit_category(db, category)


async def delete_category(category_id: int, db: AsyncSession) -> None:
    category = await get_category(category_id, db)
    await db.delete(category)
    await db.commit()
