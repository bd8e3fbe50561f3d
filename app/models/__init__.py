"""
MindMeld Backend - Models Module

This module exports all SQLAlchemy models for the application.
Import Base for Alembic migrations.
"""

from app.core.database import Base

# Enums
from app.models.enums import (
    UserRole,
    OrderStatus,
    Difficulty,
    ActivityAction,
)

# Models
from app.models.user import User
from app.models.category import Category
from app.models.product import Product
from app.models.enrollment import Enrollment
from app.models.cart import CartItem, WishlistItem
from app.models.order import Order, OrderItem
from app.models.feedback import Feedback
from app.models.message import Message
from app.models.user_activity import UserActivity
from app.models.password_reset_token import PasswordResetToken

__all__ = [
    # Base
    "Base",
    # Enums
    "UserRole",
    "OrderStatus",
    "Difficulty",
    "ActivityAction",
    # Models
    "User",
    "Category",
    "Product",
    "Enrollment",
    "CartItem",
    "WishlistItem",
    "Order",
    "OrderItem",
    "Feedback",
    "Message",
    "UserActivity",
    "PasswordResetToken",
]
