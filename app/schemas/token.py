"""
Token Schemas

Pydantic models for JWT token handling.
"""

from pydantic import BaseModel

from app.schemas.user import UserSummary


class AuthResponse(BaseModel):
    """Token plus the profile it was issued for."""
    
    token: str
    token_type: str = "bearer"
    user: UserSummary


class TokenPayload(BaseModel):
    """Schema for decoded token payload."""
    
    sub: str  # User ID
    role: str
    exp: int
