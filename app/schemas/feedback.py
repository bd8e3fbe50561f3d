"""
Feedback Schemas
"""

import uuid
from datetime import datetime
from typing import Dict

from pydantic import BaseModel, Field

from app.models.enums import Difficulty
from app.schemas.product import ProductSummary
from app.schemas.user import UserSummary


class FeedbackCreate(BaseModel):
    """Schema for submitting course feedback."""

    product_id: int
    rating: int = Field(..., ge=1, le=5)
    difficulty: Difficulty
    content: str = Field(..., min_length=1)


class FeedbackResponse(BaseModel):
    id: int
    user_id: uuid.UUID
    product_id: int
    rating: int
    difficulty: Difficulty
    content: str
    created_at: datetime
    user: UserSummary
    product: ProductSummary

    model_config = {"from_attributes": True}


class FeedbackStats(BaseModel):
    """Aggregate over all feedback."""

    total_feedback: int
    average_rating: float
    rating_distribution: Dict[int, int]
    difficulty_distribution: Dict[str, int]
