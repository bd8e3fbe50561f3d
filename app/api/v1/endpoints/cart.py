"""
Cart and Wishlist Routes
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import CurrentUser
from app.core.database import get_db
from app.schemas.commerce import (
    CartAdd,
    CartItemUpdate,
    CartResponse,
    WishlistAdd,
    WishlistResponse,
)
from app.services import cart_service


router = APIRouter(prefix="/cart", tags=["Cart"])
wishlist_router = APIRouter(prefix="/wishlist", tags=["Wishlist"])


@router.get("", response_model=CartResponse, summary="Get my cart")
async def get_cart(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> CartResponse:
    return await cart_service.get_cart(current_user.id, db)


@router.post(
    "",
    response_model=CartResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add to cart",
)
async def add_to_cart(
    data: CartAdd,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> CartResponse:
    """Add a product, or increase its quantity if already in the cart."""
    return await cart_service.add_to_cart(current_user.id, data.product_id, data.quantity, db)


@router.put("/item", response_model=CartResponse, summary="Set item quantity")
async def update_cart_item(
    data: CartItemUpdate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> CartResponse:
    """
    Set the quantity of a line; zero or less removes it.
    
    Raises:
        HTTPException: 404 if the product is not in the cart.
    """
    return await cart_service.update_cart_item(current_user.id, data.product_id, data.quantity, db)


@router.delete("/item/{product_id}", response_model=CartResponse, summary="Remove from cart")
async def remove_cart_item(
    product_id: int,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> CartResponse:
    return await cart_service.remove_cart_item(current_user.id, product_id, db)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT, summary="Clear cart")
async def clear_cart(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    await cart_service.clear_cart(current_user.id, db)


@wishlist_router.get("", response_model=WishlistResponse, summary="Get my wishlist")
async def get_wishlist(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> WishlistResponse:
    return await cart_service.get_wishlist(current_user.id, db)


@wishlist_router.post(
    "",
    response_model=WishlistResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add to wishlist",
)
async def add_to_wishlist(
    data: WishlistAdd,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> WishlistResponse:
    return await cart_service.add_to_wishlist(current_user.id, data.product_id, db)


@wishlist_router.delete("/{product_id}", response_model=WishlistResponse, summary="Remove from wishlist")
async def remove_from_wishlist(
    product_id: int,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> WishlistResponse:
    return await cart_service.remove_from_wishlist(current_user.id, product_id, db)
