"""
MindMeld Backend - Schemas Module

Pydantic models for request/response validation.
"""

from app.schemas.user import (
    UserCreate,
    UserLogin,
    UserSummary,
    UserResponse,
    ProfileUpdate,
    UserAdminUpdate,
)
from app.schemas.token import AuthResponse, TokenPayload
from app.schemas.product import (
    CategoryCreate,
    CategoryUpdate,
    CategoryResponse,
    ProductCreate,
    ProductUpdate,
    ProductResponse,
    ProductWithEnrollments,
    ProductSummary,
)
from app.schemas.enrollment import EnrollmentCreate, EnrollmentUpdate, EnrollmentResponse

__all__ = [
    # User
    "UserCreate",
    "UserLogin",
    "UserSummary",
    "UserResponse",
    "ProfileUpdate",
    "UserAdminUpdate",
    # Token
    "AuthResponse",
    "TokenPayload",
    # Product
    "CategoryCreate",
    "CategoryUpdate",
    "CategoryResponse",
    "ProductCreate",
    "ProductUpdate",
    "ProductResponse",
    "ProductWithEnrollments",
    "ProductSummary",
    # Enrollment
    "EnrollmentCreate",
    "EnrollmentUpdate",
    "EnrollmentResponse",
]
