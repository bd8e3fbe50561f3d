"""
Enrollment Schemas

Pydantic models for enrollment and progress updates.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.schemas.product import ProductSummary


class EnrollmentCreate(BaseModel):
    """Schema for enrolling in a course."""
    
    product_id: int = Field(..., description="Course to enroll in")


class EnrollmentUpdate(BaseModel):
    """
    Schema for progress reports.
    
    Progress is not range-validated here: out-of-range values are clamped
    into [0, 100] by the service.
    """
    
    progress: Optional[int] = Field(None, description="Progress percentage")
    completed: Optional[bool] = Field(None, description="Completion flag")


class EnrollmentResponse(BaseModel):
    """Schema for enrollment response with the course embedded."""
    
    id: int
    user_id: uuid.UUID
    product_id: int
    progress: int
    completed: bool
    enrolled_at: datetime
    updated_at: datetime
    product: Optional[ProductSummary] = None
    
    model_config = {"from_attributes": True}
