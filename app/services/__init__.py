"""
MindMeld Backend - Services Module

Business logic layer.
"""

from app.services import activity_service
from app.services import slug_service
from app.services import product_service
from app.services import enrollment_service
from app.services import cart_service
from app.services import order_service
from app.services import feedback_service
from app.services import message_service
from app.services import user_service
from app.services import storage_service
from app.services import password_reset_service

__all__ = [
    "activity_service",
    "slug_service",
    "product_service",
    "enrollment_service",
    "cart_service",
    "order_service",
    "feedback_service",
    "message_service",
    "user_service",
    "storage_service",
    "password_reset_service",
]
