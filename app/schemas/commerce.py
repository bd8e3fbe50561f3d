"""
Commerce Schemas

Pydantic models for cart, wishlist and orders.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from app.models.enums import OrderStatus
from app.schemas.product import ProductSummary
from app.schemas.user import UserSummary


# ============== Cart ==============

class CartAdd(BaseModel):
    """Add a product to the cart (increments an existing line)."""

    product_id: int
    quantity: int = Field(default=1, ge=1)


class CartItemUpdate(BaseModel):
    """Set a line's quantity; zero or less removes it."""

    product_id: int
    quantity: int


class CartItemResponse(BaseModel):
    product_id: int
    quantity: int
    product: Optional[ProductSummary] = None

    model_config = {"from_attributes": True}


class CartResponse(BaseModel):
    user_id: uuid.UUID
    items: List[CartItemResponse] = []


# ============== Wishlist ==============

class WishlistAdd(BaseModel):
    product_id: int


class WishlistResponse(BaseModel):
    user_id: uuid.UUID
    products: List[ProductSummary] = []


# ============== Orders ==============

class ShippingAddress(BaseModel):
    line1: Optional[str] = None
    line2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None


class OrderItemCreate(BaseModel):
    product_id: int
    quantity: int = Field(default=1, ge=1)


class OrderCreate(BaseModel):
    """Schema for placing an order. Prices come from the catalogue, not the client."""

    items: List[OrderItemCreate] = Field(default_factory=list)
    shipping_address: Optional[ShippingAddress] = None


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class OrderItemResponse(BaseModel):
    product_id: Optional[int] = None
    name: str
    quantity: int
    price: float

    model_config = {"from_attributes": True}


class OrderResponse(BaseModel):
    id: int
    user_id: uuid.UUID
    items: List[OrderItemResponse] = []
    total_price: float
    status: OrderStatus
    shipping_address: Optional[dict] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class AdminOrderResponse(OrderResponse):
    user: Optional[UserSummary] = None
