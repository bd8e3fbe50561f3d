"""
Slug Service Tests

Tests for slug derivation and collision suffixing.
"""

import pytest


class TestSlugify:
    """Tests for slugify()."""

    def test_strips_punctuation_and_lowercases(self):
        """Verify punctuation is dropped and words are hyphenated."""
        from app.services.slug_service import slugify

        assert slugify("Intro to Go!") == "intro-to-go"

    def test_collapses_separator_runs(self):
        """Verify spaces, underscores and hyphens collapse to a single hyphen."""
        from app.services.slug_service import slugify

        assert slugify("  Data __ Science -- 101  ") == "data-science-101"

    def test_trims_edge_hyphens(self):
        from app.services.slug_service import slugify

        assert slugify("-Leadership-") == "leadership"

    def test_unusable_name_falls_back(self):
        """Verify a name with no slug characters gets the fallback base."""
        from app.services.slug_service import FALLBACK_SLUG, slugify

        assert slugify("!!! ???") == FALLBACK_SLUG
        assert slugify("日本語") == FALLBACK_SLUG

    def test_with_suffix(self):
        from app.services.slug_service import with_suffix

        assert with_suffix("intro-to-go", 0) == "intro-to-go"
        assert with_suffix("intro-to-go", 2) == "intro-to-go-2"


class TestGenerateUniqueSlug:
    """Tests for generate_unique_slug() against the database."""

    @pytest.mark.asyncio
    async def test_returns_base_when_free(self, db_session):
        from app.services.slug_service import generate_unique_slug

        assert await generate_unique_slug(db_session, "Intro to Go!") == "intro-to-go"

    @pytest.mark.asyncio
    async def test_suffixes_until_free(self, db_session):
        """Verify taken slugs are skipped in order: base, base-1, base-2."""
        from app.models import Product
        from app.services.slug_service import generate_unique_slug

        db_session.add_all([
            Product(name="Intro to Go", slug="intro-to-go", price=10, tags=[]),
            Product(name="Intro to Go", slug="intro-to-go-1", price=10, tags=[]),
        ])
        await db_session.commit()

        assert await generate_unique_slug(db_session, "Intro to Go!") == "intro-to-go-2"

    @pytest.mark.asyncio
    async def test_ignores_excluded_product(self, db_session):
        """Verify a product keeps its own slug when regenerated."""
        from app.models import Product
        from app.services.slug_service import generate_unique_slug

        product = Product(name="Leadership", slug="leadership", price=10, tags=[])
        db_session.add(product)
        await db_session.commit()

        slug = await generate_unique_slug(db_session, "Leadership", exclude_id=product.id)

        assert slug == "leadership"
