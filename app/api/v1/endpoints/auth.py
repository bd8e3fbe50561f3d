"""
Authentication Routes

Handles registration, login, profile, avatar and password reset endpoints.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Request, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import CurrentUser, client_ip, get_mailer
from app.core.database import get_db
from app.schemas.auth import (
    ForgotPasswordRequest,
    MessageResponse,
    ResetPasswordRequest,
    VerifyOTPRequest,
    VerifyOTPResponse,
)
from app.schemas.token import AuthResponse
from app.schemas.user import ProfileUpdate, UserCreate, UserLogin, UserResponse
from app.services import password_reset_service, storage_service, user_service
from app.services.email_service import Mailer


router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new user account",
)
async def register(
    user_data: UserCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AuthResponse:
    """
    Create a new account and return a token for it.
    
    **Flow:**
    1. Check if email already exists in database
    2. Hash the password using bcrypt
    3. Create the user with role `user`
    4. Return a JWT plus the profile
    
    Raises:
        HTTPException: 400 if email already exists.
    """
    user = await user_service.register(user_data, db)
    return AuthResponse(token=user_service.issue_token(user), user=user)


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Login with email and password",
)
async def login(
    credentials: UserLogin,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AuthResponse:
    """
    Authenticate and return a JWT token.
    
    Raises:
        HTTPException: 401 if credentials are invalid.
    """
    user = await user_service.authenticate(
        credentials.email,
        credentials.password,
        db,
        ip_address=client_ip(request),
        user_agent=request.headers.get("user-agent"),
    )
    return AuthResponse(token=user_service.issue_token(user), user=user)


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Get current user profile",
)
async def get_me(current_user: CurrentUser) -> UserResponse:
    return current_user


@router.put(
    "/profile",
    response_model=UserResponse,
    summary="Update own profile",
)
async def update_profile(
    data: ProfileUpdate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserResponse:
    """
    Change the display name or point the avatar elsewhere.
    
    A replaced avatar that was uploaded here is removed from disk.
    """
    previous = current_user.avatar_url
    user = await user_service.update_profile(current_user, data, db)
    if user.avatar_url != previous:
        storage_service.delete_avatar_file(previous, user.id)
    return user


@router.post(
    "/upload-avatar",
    response_model=UserResponse,
    summary="Upload a profile picture",
)
async def upload_avatar(
    request: Request,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    avatar: UploadFile = File(..., description="Image file"),
) -> UserResponse:
    """
    Store an avatar image and point the profile at it.
    
    The previous avatar file, if any, is removed from disk.
    
    Raises:
        HTTPException: 400 if the file is not an image or too large.
    """
    previous = current_user.avatar_url
    filename = await storage_service.save_avatar(avatar, current_user.id)
    user = await user_service.set_avatar(
        current_user,
        storage_service.public_url(str(request.base_url), filename),
        db,
    )
    storage_service.delete_avatar_file(previous, current_user.id)
    return user


@router.delete(
    "/upload-avatar",
    response_model=UserResponse,
    summary="Remove the profile picture",
)
async def delete_avatar(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserResponse:
    previous = current_user.avatar_url
    user = await user_service.set_avatar(current_user, None, db)
    storage_service.delete_avatar_file(previous, current_user.id)
    return user


@router.post(
    "/password/forgot",
    response_model=MessageResponse,
    summary="Request a password reset code",
)
async def forgot_password(
    data: ForgotPasswordRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    mailer: Annotated[Mailer, Depends(get_mailer)],
) -> MessageResponse:
    """
    Email a six-digit reset code.
    
    The answer is the same whether or not the email is registered.
    """
    message = await password_reset_service.request_reset(data.email, db, mailer)
    return MessageResponse(message=message)


@router.post(
    "/password/verify-otp",
    response_model=VerifyOTPResponse,
    summary="Check a password reset code",
)
async def verify_otp(
    data: VerifyOTPRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> VerifyOTPResponse:
    """
    Raises:
        HTTPException: 400 if the code is invalid or expired.
    """
    await password_reset_service.verify_otp(data.email, data.otp, db)
    return VerifyOTPResponse(message="OTP verified")


@router.post(
    "/password/reset",
    response_model=MessageResponse,
    summary="Reset password with a code",
)
async def reset_password(
    data: ResetPasswordRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> MessageResponse:
    """
    Raises:
        HTTPException: 400 if the code is invalid or expired.
    """
    await password_reset_service.reset_password(data.email, data.otp, data.password, db)
    return MessageResponse(message="Password has been reset successfully")
