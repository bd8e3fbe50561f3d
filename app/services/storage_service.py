"""
Storage Service

Avatar files on local disk, served from the /uploads static mount.
"""

import logging
import uuid
from pathlib import Path
from typing import Optional

from fastapi import HTTPException, UploadFile, status

from app.core.config import settings


logger = logging.getLogger(__name__)

PUBLIC_PREFIX = "uploads"

ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}


def upload_dir() -> Path:
    path = Path(settings.UPLOAD_DIR)
    path.mkdir(parents=True, exist_ok=True)
    return path


def public_url(base_url: str, filename: str) -> str:
    return f"{base_url.rstrip('/')}/{PUBLIC_PREFIX}/{filename}"


async def save_avatar(file: UploadFile, user_id: uuid.UUID) -> str:
    """
    Validate and store an uploaded avatar.
    
    Returns:
        str: The stored file name.
        
    Raises:
        HTTPException: 400 if the file is not an image or is too large.
    """
    if not file.content_type or not file.content_type.startswith("image/"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only image files are allowed",
        )

    data = await file.read()
    if len(data) > settings.MAX_AVATAR_SIZE_BYTES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="File too large",
        )

    suffix = Path(file.filename or "").suffix.lower()
    if suffix not in ALLOWED_EXTENSIONS:
        suffix = ".png"

    filename = f"{avatar_filename_prefix(user_id)}{uuid.uuid4().hex[:8]}{suffix}"
    (upload_dir() / filename).write_bytes(data)
    logger.info("Stored avatar %s", filename)
    return filename


def avatar_filename_prefix(user_id: uuid.UUID) -> str:
    return f"avatar-{user_id}-"


def delete_avatar_file(avatar_url: Optional[str], owner_id: uuid.UUID) -> None:
    """
    Remove the file behind a stored avatar URL.

    Only files this service stored for `owner_id` are touched; any other
    URL, including another user's upload, is left alone.
    """
    if not avatar_url or f"/{PUBLIC_PREFIX}/" not in avatar_url:
        return

    name = Path(avatar_url).name
    if not name.startswith(avatar_filename_prefix(owner_id)):
        logger.warning("Refusing to delete avatar %s not owned by %s", name, owner_id)
        return

    path = upload_dir() / name
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.error(f"Failed to delete avatar file {path}: {e}")
