"""
Product Schemas

Pydantic models for course and category request/response validation.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


# ============== Category Schemas ==============

class CategoryCreate(BaseModel):
    """Schema for creating a category."""

    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None


class CategoryUpdate(BaseModel):
    """Schema for updating a category."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None


class CategoryResponse(BaseModel):
    """Schema for category response."""

    id: int
    name: str
    description: Optional[str] = None

    model_config = {"from_attributes": True}


# ============== Product Schemas ==============

class ProductCreate(BaseModel):
    """Schema for creating a course. The slug is derived from the name when omitted."""
    
    name: str = Field(..., min_length=1, max_length=255)
    slug: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    price: float = Field(..., ge=0)
    category_id: Optional[int] = None
    image: Optional[str] = Field(None, max_length=512)
    stock: int = Field(default=0, ge=0)
    tags: List[str] = Field(default_factory=list)
    is_featured: bool = False


class ProductUpdate(BaseModel):
    """Schema for partial course updates."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    slug: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    category_id: Optional[int] = None
    image: Optional[str] = Field(None, max_length=512)
    stock: Optional[int] = Field(None, ge=0)
    tags: Optional[List[str]] = None
    is_featured: Optional[bool] = None


class ProductResponse(BaseModel):
    """Schema for course response with nested category."""
    
    id: int
    name: str
    slug: Optional[str] = None
    description: Optional[str] = None
    price: float
    category_id: Optional[int] = None
    category: Optional[CategoryResponse] = None
    image: Optional[str] = None
    stock: int
    tags: List[str] = []
    is_featured: bool
    created_at: datetime
    updated_at: datetime
    
    model_config = {"from_attributes": True}


class ProductWithEnrollments(ProductResponse):
    """Course plus its enrollment count (admin dashboards)."""

    enrollment_count: int = 0


class ProductSummary(BaseModel):
    """Compact course representation embedded in other resources."""

    id: int
    name: str
    slug: Optional[str] = None
    image: Optional[str] = None
    description: Optional[str] = None
    price: float
    category_id: Optional[int] = None

    model_config = {"from_attributes": True}
