"""
Slug Service

Derives URL-safe identifiers from course names and finds a free one.
"""

import re
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.product import Product


FALLBACK_SLUG = "course"

_DISALLOWED = re.compile(r"[^a-z0-9\s_-]")
_SEPARATORS = re.compile(r"[\s_-]+")


def slugify(name: str) -> str:
    """
    Turn a display name into a lowercase hyphenated slug.
    
    Example: "Intro to Go!" -> "intro-to-go"
    
    Characters outside [a-z0-9], whitespace, "_" and "-" are dropped,
    separator runs collapse to one hyphen, and edge hyphens are trimmed.
    A name with nothing usable yields FALLBACK_SLUG.
    """
    slug = _DISALLOWED.sub("", name.lower().strip())
    slug = _SEPARATORS.sub("-", slug).strip("-")
    return slug or FALLBACK_SLUG


def with_suffix(base: str, counter: int) -> str:
    """`base` for counter 0, otherwise `base-<counter>`."""
    return base if counter == 0 else f"{base}-{counter}"


async def slug_exists(
    db: AsyncSession,
    slug: str,
    exclude_id: Optional[int] = None,
) -> bool:
    """Check whether a product other than `exclude_id` already uses `slug`."""
    query = select(Product.id).where(Product.slug == slug)
    if exclude_id is not None:
        query = query.where(Product.id != exclude_id)
    result = await db.execute(query.limit(1))
    return result.first() is not None


async def generate_unique_slug(
    db: AsyncSession,
    name: str,
    exclude_id: Optional[int] = None,
) -> str:
    """
    Find the first free slug for `name`: base, base-1, base-2, ...

    The lookup is advisory. Two concurrent callers can receive the same
    answer; the unique index on products.slug rejects the second write and
    the caller retries, by which time the winning row is visible.

    Args:
        db: Database session.
        name: Course name.
        exclude_id: Product being updated, ignored in the collision check.
    """
    base = slugify(name)
    counter = 0
    while await slug_exists(db, with_suffix(base, counter), exclude_id):
        counter += 1
    return with_suffix(base, counter)
