"""
User Service

Registration, login, profile updates and admin account management.
"""

import logging
import uuid
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import create_access_token, hash_password, verify_password
from app.models.enums import ActivityAction, UserRole
from app.models.user import User
from app.schemas.user import ProfileUpdate, UserAdminUpdate, UserCreate
from app.services import activity_service


logger = logging.getLogger(__name__)

EMAIL_TAKEN = "User already exists"


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email.lower()))
    return result.scalar_one_or_none()


async def get_user_by_id(user_id: uuid.UUID, db: AsyncSession) -> User:
    """
    Raises:
        HTTPException: 404 if the user does not exist.
    """
    result = await db.execute(
        select(User)
        .where(User.id == user_id)
        .execution_options(populate_existing=True)
    )
    user = result.scalar_one_or_none()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )
    return user


def issue_token(user: User) -> str:
    return create_access_token(subject=user.id, role=user.role.value)


async def register(data: UserCreate, db: AsyncSession) -> User:
    """
    Create a `user` account.
    
    Raises:
        HTTPException: 400 if the email is already registered.
    """
    if await get_user_by_email(db, data.email) is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=EMAIL_TAKEN,
        )

    user = User(
        name=data.name,
        email=data.email.lower(),
        password_hash=hash_password(data.password),
        role=UserRole.USER,
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=EMAIL_TAKEN,
        )

    logger.info("Registered user %s", user.id)
    return await get_user_by_id(user.id, db)


async def authenticate(
    email: str,
    password: str,
    db: AsyncSession,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> User:
    """
    Check credentials and record a login activity.
    
    Raises:
        HTTPException: 401 on unknown email or wrong password.
    """
    user = await get_user_by_email(db, email)
    if user is None or not verify_password(password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = user.id
    await activity_service.log_activity(
        db,
        user_id,
        ActivityAction.LOGIN,
        "User logged in",
        {"email": user.email, "role": user.role.value},
        ip_address=ip_address,
        user_agent=user_agent,
    )
    return await get_user_by_id(user_id, db)


async def update_profile(user: User, data: ProfileUpdate, db: AsyncSession) -> User:
    """Apply a self-service profile edit. Only a real name change is logged."""
    user_id = user.id
    old_name = user.name
    updates = data.model_dump(exclude_unset=True)

    for field, value in updates.items():
        if value is not None:
            setattr(user, field, value)
    await db.commit()

    new_name = updates.get("name")
    if new_name and new_name != old_name:
        await activity_service.log_activity(
            db,
            user_id,
            ActivityAction.PROFILE_UPDATED,
            "Profile updated",
            {"old_name": old_name, "new_name": new_name},
        )

    return await get_user_by_id(user_id, db)


async def set_avatar(user: User, avatar_url: Optional[str], db: AsyncSession) -> User:
    user_id = user.id
    user.avatar_url = avatar_url
    await db.commit()
    return await get_user_by_id(user_id, db)


# ============== Admin ==============

async def list_users(db: AsyncSession) -> List[User]:
    result = await db.execute(select(User).order_by(User.created_at.desc(), User.name))
    return list(result.scalars().all())


async def admin_update_user(user_id: uuid.UUID, data: UserAdminUpdate, db: AsyncSession) -> User:
    """
    Update any account.
    
    Raises:
        HTTPException: 404 if missing, 400 if the new email is taken.
    """
    user = await get_user_by_id(user_id, db)
    updates = data.model_dump(exclude_unset=True, exclude_none=True)

    if "email" in updates:
        updates["email"] = updates["email"].lower()
        other = await get_user_by_email(db, updates["email"])
        if other is not None and other.id != user_id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Email already in use",
            )

    password = updates.pop("password", None)
    if password:
        user.password_hash = hash_password(password)

    for field, value in updates.items():
        setattr(user, field, value)

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already in use",
        )

    return await get_user_by_id(user_id, db)


async def delete_user(user_id: uuid.UUID, db: AsyncSession) -> None:
    user = await get_user_by_id(user_id, db)
    await db.delete(user)
    await db.commit()
    logger.info("Deleted user %s", user_id)
