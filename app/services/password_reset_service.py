"""
Password Reset Service

Handles reset OTP generation, storage, and verification.

A user holds at most one active token; requesting a new code replaces it.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.security import generate_otp, hash_otp, hash_password
from app.models.enums import ActivityAction
from app.models.password_reset_token import PasswordResetToken
from app.models.user import User
from app.services import activity_service
from app.services.email_service import Mailer


logger = logging.getLogger(__name__)

FORGOT_PASSWORD_MESSAGE = "If an account exists for that email, a reset code has been sent"
INVALID_OTP = "Invalid or expired OTP"


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


async def _get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email.lower()))
    return result.scalar_one_or_none()


async def request_reset(email: str, db: AsyncSession, mailer: Mailer) -> str:
    """
    Issue a reset code and email it.
    
    Flow:
    1. Look up the user; unknown emails get the same answer
    2. Replace any existing token with a new hashed one
    3. Email the plain code
    
    Returns:
        str: The generic acknowledgement message.
        
    Raises:
        HTTPException: 500 if the email could not be sent.
    """
    user = await _get_user_by_email(db, email)
    if user is None:
        logger.info("Password reset requested for unknown email")
        return FORGOT_PASSWORD_MESSAGE

    user_id = user.id
    user_email = user.email
    user_name = user.name
    expires_minutes = settings.PASSWORD_RESET_EXP_MINUTES

    await db.execute(delete(PasswordResetToken).where(PasswordResetToken.user_id == user_id))

    plain_otp = generate_otp()
    db.add(
        PasswordResetToken(
            user_id=user_id,
            email=user_email,
            otp_hash=hash_otp(plain_otp),
            expires_at=datetime.now(timezone.utc) + timedelta(minutes=expires_minutes),
        )
    )
    await db.commit()

    sent = await mailer.send_password_reset(user_email, plain_otp, user_name, expires_minutes)
    if not sent:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to send reset email",
        )

    return FORGOT_PASSWORD_MESSAGE


async def _find_valid_token(db: AsyncSession, email: str, otp: str) -> PasswordResetToken:
    """
    The unexpired token matching (email, otp).
    
    Raises:
        HTTPException: 400 if there is none.
    """
    result = await db.execute(
        select(PasswordResetToken).where(
            PasswordResetToken.email == email.lower(),
            PasswordResetToken.otp_hash == hash_otp(otp),
        )
    )
    token = result.scalars().first()

    if token is None or _as_utc(token.expires_at) <= datetime.now(timezone.utc):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=INVALID_OTP,
        )

    return token


async def verify_otp(email: str, otp: str, db: AsyncSession) -> None:
    """Check a code without consuming it."""
    await _find_valid_token(db, email, otp)


async def reset_password(email: str, otp: str, new_password: str, db: AsyncSession) -> None:
    """
    Set a new password using a valid code, then drop the user's tokens.
    
    Raises:
        HTTPException: 400 if the code is invalid or expired.
    """
    token = await _find_valid_token(db, email, otp)
    user_id = token.user_id

    user = await db.get(User, user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=INVALID_OTP,
        )

    user.password_hash = hash_password(new_password)
    await db.execute(delete(PasswordResetToken).where(PasswordResetToken.user_id == user_id))
    await db.commit()

    await activity_service.log_activity(
        db,
        user_id,
        ActivityAction.PASSWORD_CHANGED,
        "Password reset via email code",
        {"method": "otp"},
    )
