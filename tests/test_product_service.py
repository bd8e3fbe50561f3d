"""
Product Service Tests

Slug allocation when concurrent writers collide, and the slug backfill.
"""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi import HTTPException
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from app.models import Product
from app.schemas.product import ProductCreate, ProductUpdate


async def _insert(db, name, slug):
    product = Product(name=name, slug=slug, price=10, tags=[])
    db.add(product)
    await db.commit()
    return product.id


class TestSlugCollisions:
    """Tests for the unique-index backstop behind slug generation."""

    @pytest.mark.asyncio
    async def test_stale_lookup_retries_with_next_suffix(self, db_session):
        """Verify a lost race on intro-to-go lands on intro-to-go-1."""
        from app.services import product_service, slug_service

        await _insert(db_session, "Intro to Go", "intro-to-go")
        real_slug_exists = slug_service.slug_exists
        calls = {"n": 0}

        async def stale_once(db, slug, exclude_id=None):
            calls["n"] += 1
            if calls["n"] == 1:
                return False
            return await real_slug_exists(db, slug, exclude_id)

        with patch.object(slug_service, "slug_exists", new=stale_once):
            product = await product_service.create_product(
                ProductCreate(name="Intro to Go", price=12), db_session
            )

        assert product.slug == "intro-to-go-1"
        assert product.price == 12

    @pytest.mark.asyncio
    async def test_gives_up_with_409(self, db_session):
        from app.services import product_service, slug_service

        await _insert(db_session, "Intro to Go", "intro-to-go")

        with patch.object(slug_service, "slug_exists", new=AsyncMock(return_value=False)):
            with pytest.raises(HTTPException) as exc_info:
                await product_service.create_product(
                    ProductCreate(name="Intro to Go", price=12), db_session
                )

        assert exc_info.value.status_code == 409
        count = await db_session.execute(select(func.count()).select_from(Product))
        assert count.scalar_one() == 1

    @pytest.mark.asyncio
    async def test_explicit_slug_collision_is_400(self, db_session):
        from app.services import product_service

        await _insert(db_session, "Intro to Go", "intro-to-go")

        with pytest.raises(HTTPException) as exc_info:
            await product_service.create_product(
                ProductCreate(name="Go Again", slug="intro-to-go", price=12), db_session
            )

        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == "Slug 'intro-to-go' is already in use"

    @pytest.mark.asyncio
    async def test_conflict_without_slug_change_not_blamed_on_slug(self, db_session):
        """An update that leaves the slug alone reports a generic conflict."""
        from app.services import product_service

        product_id = await _insert(db_session, "Intro to Go", "intro-to-go")
        failing_commit = AsyncMock(
            side_effect=IntegrityError("UPDATE products", {}, Exception("constraint failed"))
        )

        with patch.object(db_session, "commit", new=failing_commit):
            with pytest.raises(HTTPException) as exc_info:
                await product_service.update_product(
                    product_id, ProductUpdate(price=99), db_session
                )

        assert exc_info.value.status_code == 400
        assert "Slug" not in exc_info.value.detail
        failing_commit.assert_awaited_once()


class TestBackfillMissingSlugs:
    """Tests for backfill_missing_slugs() and the maintenance script."""

    @pytest.mark.asyncio
    async def test_fills_null_and_empty_slugs(self, db_session):
        from app.services import product_service

        await _insert(db_session, "Intro to Go", None)
        await _insert(db_session, "Intro to Go", "")
        await _insert(db_session, "Rust Basics", "rust-basics")

        fixed = await product_service.backfill_missing_slugs(db_session)

        assert fixed == [("Intro to Go", "intro-to-go"), ("Intro to Go", "intro-to-go-1")]
        result = await db_session.execute(select(Product.slug).order_by(Product.id))
        assert result.scalars().all() == ["intro-to-go", "intro-to-go-1", "rust-basics"]

    @pytest.mark.asyncio
    async def test_nothing_to_fix(self, db_session):
        from app.services import product_service

        await _insert(db_session, "Rust Basics", "rust-basics")

        assert await product_service.backfill_missing_slugs(db_session) == []

    @pytest.mark.asyncio
    async def test_script_reports_count(self, session_maker, db_session):
        from app.scripts import fix_product_slugs

        await _insert(db_session, "Data Science 101", None)

        with patch.object(fix_product_slugs, "get_session_maker", return_value=session_maker):
            count = await fix_product_slugs.fix_product_slugs()

        assert count == 1
        result = await db_session.execute(
            select(Product.slug).execution_options(populate_existing=True)
        )
        assert result.scalars().all() == ["data-science-101"]
