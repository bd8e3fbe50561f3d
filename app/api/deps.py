"""
API Dependencies

Reusable dependencies for API routes: authentication, role gates and the
mailer.
"""

import uuid
from typing import Annotated, Callable

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import policy
from app.core.database import get_db
from app.core.security import decode_access_token
from app.models.user import User
from app.services.email_service import Mailer


# Bearer scheme; a missing header is turned into 401 below instead of 403
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """
    Dependency to get the current authenticated user.
    
    This dependency:
    1. Extracts the bearer token from the Authorization header
    2. Decodes and validates the token
    3. Fetches the user from the database
    4. Raises 401 if the header is missing, the token is invalid or the
       user no longer exists
    
    Args:
        credentials: Bearer credentials (auto-extracted).
        db: Database session (auto-injected).
        
    Returns:
        User: The authenticated user object.
        
    Raises:
        HTTPException: 401 if authentication fails.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authorized, no token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authorized, token failed",
        headers={"WWW-Authenticate": "Bearer"},
    )

    # Decode the JWT token
    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise credentials_exception

    # Extract user ID from token payload
    user_id_str: str | None = payload.get("sub")
    if user_id_str is None:
        raise credentials_exception

    try:
        user_id = uuid.UUID(user_id_str)
    except ValueError:
        raise credentials_exception

    # Fetch user from database
    result = await db.execute(
        select(User).where(User.id == user_id)
    )
    user = result.scalar_one_or_none()

    if user is None:
        raise credentials_exception

    return user


CurrentUser = Annotated[User, Depends(get_current_user)]


def require_permission(resource: str, action: str) -> Callable:
    """
    Build a dependency that admits only roles listed for (resource, action)
    in app.core.policy.PERMISSIONS.
    
    Usage:
        current_user: Annotated[User, Depends(require_permission("products", "create"))]
    """

    async def checker(current_user: CurrentUser) -> User:
        if not policy.is_allowed(current_user.role, resource, action):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"User role {current_user.role.value} is not authorized to access this route",
            )
        return current_user

    return checker


def get_mailer(request: Request) -> Mailer:
    """The Mailer created at startup."""
    return request.app.state.mailer


def client_ip(request: Request) -> str | None:
    """Client address, preferring the first X-Forwarded-For hop."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None
