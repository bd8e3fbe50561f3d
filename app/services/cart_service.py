"""
Cart Service

User-scoped cart (product -> quantity) and wishlist (set of products).
"""

import uuid
from typing import List

from fastapi import HTTPException, status
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.cart import CartItem, WishlistItem
from app.models.product import Product
from app.schemas.commerce import CartResponse, WishlistResponse


async def _ensure_product(db: AsyncSession, product_id: int) -> None:
    if await db.get(Product, product_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Product not found",
        )


# ============== Cart ==============

async def get_cart(user_id: uuid.UUID, db: AsyncSession) -> CartResponse:
    """The user's cart; an empty item list when nothing was added yet."""
    result = await db.execute(
        select(CartItem)
        .where(CartItem.user_id == user_id)
        .order_by(CartItem.id)
        .execution_options(populate_existing=True)
    )
    items: List[CartItem] = list(result.scalars().all())
    return CartResponse.model_validate({"user_id": user_id, "items": items}, from_attributes=True)


async def _get_line(db: AsyncSession, user_id: uuid.UUID, product_id: int) -> CartItem | None:
    result = await db.execute(
        select(CartItem).where(CartItem.user_id == user_id, CartItem.product_id == product_id)
    )
    return result.scalar_one_or_none()


async def add_to_cart(
    user_id: uuid.UUID,
    product_id: int,
    quantity: int,
    db: AsyncSession,
) -> CartResponse:
    """Add a product, incrementing the quantity of an existing line."""
    await _ensure_product(db, product_id)

    line = await _get_line(db, user_id, product_id)
    if line is None:
        db.add(CartItem(user_id=user_id, product_id=product_id, quantity=quantity))
    else:
        line.quantity += quantity

    try:
        await db.commit()
    except IntegrityError:
        # Lost an insert race for the same line; increment the winner's row
        await db.rollback()
        line = await _get_line(db, user_id, product_id)
        line.quantity += quantity
        await db.commit()

    return await get_cart(user_id, db)


async def update_cart_item(
    user_id: uuid.UUID,
    product_id: int,
    quantity: int,
    db: AsyncSession,
) -> CartResponse:
    """
    Set a line's quantity. Zero or less removes the line.
    
    Raises:
        HTTPException: 404 if the product is not in the cart.
    """
    line = await _get_line(db, user_id, product_id)
    if line is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Cart item not found",
        )

    if quantity <= 0:
        await db.delete(line)
    else:
        line.quantity = quantity
    await db.commit()

    return await get_cart(user_id, db)


async def remove_cart_item(user_id: uuid.UUID, product_id: int, db: AsyncSession) -> CartResponse:
    """Remove a line if present."""
    await db.execute(
        delete(CartItem).where(CartItem.user_id == user_id, CartItem.product_id == product_id)
    )
    await db.commit()
    return await get_cart(user_id, db)


async def clear_cart(user_id: uuid.UUID, db: AsyncSession, commit: bool = True) -> None:
    """Remove every line from the user's cart."""
    await db.execute(delete(CartItem).where(CartItem.user_id == user_id))
    if commit:
        await db.commit()


# ============== Wishlist ==============

async def get_wishlist(user_id: uuid.UUID, db: AsyncSession) -> WishlistResponse:
    result = await db.execute(
        select(WishlistItem)
        .where(WishlistItem.user_id == user_id)
        .order_by(WishlistItem.id)
        .execution_options(populate_existing=True)
    )
    products = [item.product for item in result.scalars().all()]
    return WishlistResponse.model_validate(
        {"user_id": user_id, "products": products}, from_attributes=True
    )


async def add_to_wishlist(user_id: uuid.UUID, product_id: int, db: AsyncSession) -> WishlistResponse:
    """Add a product; adding one that is already there is a no-op."""
    await _ensure_product(db, product_id)

    existing = await db.execute(
        select(WishlistItem.id).where(
            WishlistItem.user_id == user_id, WishlistItem.product_id == product_id
        )
    )
    if existing.first() is None:
        db.add(WishlistItem(user_id=user_id, product_id=product_id))
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()

    return await get_wishlist(user_id, db)


async def remove_from_wishlist(user_id: uuid.UUID, product_id: int, db: AsyncSession) -> WishlistResponse:
    await db.execute(
        delete(WishlistItem).where(
            WishlistItem.user_id == user_id, WishlistItem.product_id == product_id
        )
    )
    await db.commit()
    return await get_wishlist(user_id, db)
