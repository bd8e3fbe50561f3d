"""
Backfill product slugs.

Gives every product whose slug is NULL or empty a unique slug derived from
its name.

Usage:
    python -m app.scripts.fix_product_slugs
"""

import asyncio
import logging

from app.core.config import settings
from app.core.database import close_db, get_session_maker
from app.core.logging_config import setup_logging
from app.services import product_service


logger = logging.getLogger(__name__)


async def fix_product_slugs() -> int:
    """Assign missing slugs. Returns the number of products fixed."""
    session_maker = get_session_maker()
    async with session_maker() as db:
        fixed = await product_service.backfill_missing_slugs(db)

    for name, slug in fixed:
        logger.info("Assigned slug %r to %r", slug, name)
    logger.info("Fixed %d product(s) without a slug", len(fixed))
    return len(fixed)


async def main() -> None:
    try:
        await fix_product_slugs()
    finally:
        await close_db()


if __name__ == "__main__":
    setup_logging(settings.LOG_LEVEL)
    asyncio.run(main())
