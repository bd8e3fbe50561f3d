"""
Auth Schemas

Pydantic models for password reset request/response validation.
"""

from pydantic import BaseModel, EmailStr, Field


class ForgotPasswordRequest(BaseModel):
    """Schema for forgot password request."""
    
    email: EmailStr = Field(..., description="User's email address")


class VerifyOTPRequest(BaseModel):
    """Schema for OTP check without consuming the code."""
    
    email: EmailStr = Field(..., description="User's email address")
    otp: str = Field(..., min_length=6, max_length=6, description="6-digit OTP code")


class ResetPasswordRequest(BaseModel):
    """Schema for reset password request."""
    
    email: EmailStr = Field(..., description="User's email address")
    otp: str = Field(..., min_length=6, max_length=6, description="6-digit OTP code")
    password: str = Field(..., min_length=6, description="New password (min 6 characters)")


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str


class VerifyOTPResponse(MessageResponse):
    verified: bool = True
