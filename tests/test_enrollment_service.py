"""
Enrollment Service Tests

Tests for enrolling, progress clamping and completion tracking.
"""

import pytest
from fastapi import HTTPException
from sqlalchemy import func, select

from app.models import ActivityAction, Enrollment, UserActivity, UserRole


async def _count(db, model, *criteria) -> int:
    result = await db.execute(select(func.count()).select_from(model).where(*criteria))
    return result.scalar_one()


class TestClampProgress:
    """Tests for clamp_progress()."""

    @pytest.mark.parametrize(
        "reported, stored",
        [(150, 100), (-5, 0), (0, 0), (42, 42), (100, 100)],
    )
    def test_clamps_into_range(self, reported, stored):
        from app.services.enrollment_service import clamp_progress

        assert clamp_progress(reported) == stored


class TestEnroll:
    """Tests for enroll()."""

    @pytest.mark.asyncio
    async def test_creates_enrollment_and_logs_activity(self, db_session, make_user, make_product):
        from app.services import enrollment_service

        user = await make_user()
        product = await make_product(name="Intro to Go")

        enrollment = await enrollment_service.enroll(user.id, product.id, db_session)

        assert enrollment.progress == 0
        assert enrollment.completed is False
        assert enrollment.product.name == "Intro to Go"
        assert await _count(
            db_session,
            UserActivity,
            UserActivity.user_id == user.id,
            UserActivity.action == ActivityAction.COURSE_ENROLLED,
        ) == 1

    @pytest.mark.asyncio
    async def test_duplicate_enrollment_rejected(self, db_session, make_user, make_product):
        """Verify a second enrollment is a 400 and only one row exists."""
        from app.services import enrollment_service

        user = await make_user()
        product = await make_product()
        await enrollment_service.enroll(user.id, product.id, db_session)

        with pytest.raises(HTTPException) as exc_info:
            await enrollment_service.enroll(user.id, product.id, db_session)

        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == enrollment_service.ALREADY_ENROLLED
        assert await _count(
            db_session,
            Enrollment,
            Enrollment.user_id == user.id,
            Enrollment.product_id == product.id,
        ) == 1

    @pytest.mark.asyncio
    async def test_duplicate_past_stale_lookup_rejected(self, db_session, make_user, make_product):
        """Verify the unique constraint catches a duplicate the lookup missed."""
        from unittest.mock import AsyncMock, patch

        from app.services import enrollment_service

        user = await make_user()
        product = await make_product()
        await enrollment_service.enroll(user.id, product.id, db_session)

        with patch.object(enrollment_service, "find_enrollment", new=AsyncMock(return_value=None)):
            with pytest.raises(HTTPException) as exc_info:
                await enrollment_service.enroll(user.id, product.id, db_session)

        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == enrollment_service.ALREADY_ENROLLED
        assert await _count(
            db_session,
            Enrollment,
            Enrollment.user_id == user.id,
            Enrollment.product_id == product.id,
        ) == 1

    @pytest.mark.asyncio
    async def test_unknown_course_is_404(self, db_session, make_user):
        from app.services import enrollment_service

        user = await make_user()

        with pytest.raises(HTTPException) as exc_info:
            await enrollment_service.enroll(user.id, 9999, db_session)

        assert exc_info.value.status_code == 404


class TestReportProgress:
    """Tests for report_progress()."""

    @pytest.mark.asyncio
    async def test_progress_is_clamped(self, db_session, make_user, make_product):
        from app.services import enrollment_service

        user = await make_user()
        product = await make_product()
        enrollment = await enrollment_service.enroll(user.id, product.id, db_session)

        updated = await enrollment_service.report_progress(enrollment.id, user, db_session, progress=150)
        assert updated.progress == 100

        updated = await enrollment_service.report_progress(enrollment.id, user, db_session, progress=-5)
        assert updated.progress == 0

    @pytest.mark.asyncio
    async def test_completion_logged_once(self, db_session, make_user, make_product):
        """Verify only the False -> True transition records course_completed."""
        from app.services import enrollment_service

        user = await make_user()
        product = await make_product()
        enrollment = await enrollment_service.enroll(user.id, product.id, db_session)

        await enrollment_service.report_progress(enrollment.id, user, db_session, completed=True)
        await enrollment_service.report_progress(enrollment.id, user, db_session, completed=True)

        assert await _count(
            db_session,
            UserActivity,
            UserActivity.action == ActivityAction.COURSE_COMPLETED,
        ) == 1

    @pytest.mark.asyncio
    async def test_completed_does_not_touch_progress(self, db_session, make_user, make_product):
        from app.services import enrollment_service

        user = await make_user()
        product = await make_product()
        enrollment = await enrollment_service.enroll(user.id, product.id, db_session)

        updated = await enrollment_service.report_progress(
            enrollment.id, user, db_session, progress=40, completed=True
        )

        assert updated.progress == 40
        assert updated.completed is True

    @pytest.mark.asyncio
    async def test_other_user_is_forbidden(self, db_session, make_user, make_product):
        from app.services import enrollment_service

        owner = await make_user()
        stranger = await make_user()
        product = await make_product()
        enrollment = await enrollment_service.enroll(owner.id, product.id, db_session)

        with pytest.raises(HTTPException) as exc_info:
            await enrollment_service.report_progress(enrollment.id, stranger, db_session, progress=10)

        assert exc_info.value.status_code == 403

    @pytest.mark.asyncio
    async def test_admin_may_update_any_enrollment(self, db_session, make_user, make_product):
        from app.services import enrollment_service

        owner = await make_user()
        admin = await make_user(role=UserRole.ADMIN)
        product = await make_product()
        enrollment = await enrollment_service.enroll(owner.id, product.id, db_session)

        updated = await enrollment_service.report_progress(enrollment.id, admin, db_session, progress=70)

        assert updated.progress == 70
