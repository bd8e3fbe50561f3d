"""
Feedback Endpoint Tests
"""

import pytest

from app.models import UserRole


async def _submit(client, headers, product_id, rating=5, difficulty="just-right"):
    return await client.post(
        "/api/v1/feedback",
        json={
            "product_id": product_id,
            "rating": rating,
            "difficulty": difficulty,
            "content": "Clear and well paced.",
        },
        headers=headers,
    )


class TestSubmitFeedback:
    """Tests for POST /feedback."""

    @pytest.mark.asyncio
    async def test_submit_and_list_mine(self, client, make_user, make_product, auth_headers):
        user = await make_user()
        product = await make_product(name="Intro to Go")
        headers = auth_headers(user)

        response = await _submit(client, headers, product.id)

        assert response.status_code == 201
        assert response.json()["product"]["name"] == "Intro to Go"
        mine = await client.get("/api/v1/feedback/my", headers=headers)
        assert len(mine.json()) == 1

    @pytest.mark.asyncio
    async def test_second_submission_rejected(self, client, make_user, make_product, auth_headers):
        user = await make_user()
        product = await make_product()
        headers = auth_headers(user)
        await _submit(client, headers, product.id)

        response = await _submit(client, headers, product.id, rating=1)

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_duplicate_past_stale_lookup_rejected(
        self, client, make_user, make_product, auth_headers
    ):
        """The unique (user, course) constraint still rejects a second review."""
        from unittest.mock import AsyncMock, patch

        from app.services import feedback_service

        user = await make_user()
        product = await make_product()
        headers = auth_headers(user)
        await _submit(client, headers, product.id)

        with patch.object(feedback_service, "find_feedback", new=AsyncMock(return_value=None)):
            response = await _submit(client, headers, product.id, rating=1)

        assert response.status_code == 400
        assert response.json()["detail"] == feedback_service.ALREADY_SUBMITTED
        mine = await client.get("/api/v1/feedback/my", headers=headers)
        assert [f["rating"] for f in mine.json()] == [5]

    @pytest.mark.asyncio
    async def test_rating_out_of_range(self, client, make_user, make_product, auth_headers):
        user = await make_user()
        product = await make_product()

        response = await _submit(client, auth_headers(user), product.id, rating=6)

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_course_is_404(self, client, make_user, auth_headers):
        user = await make_user()

        response = await _submit(client, auth_headers(user), 4242)

        assert response.status_code == 404


class TestFeedbackStats:
    """Tests for GET /feedback/stats."""

    @pytest.mark.asyncio
    async def test_stats_distributions(self, client, make_user, make_product, auth_headers):
        product = await make_product()
        for rating, difficulty in [(5, "easy"), (4, "easy"), (4, "difficult")]:
            user = await make_user()
            await _submit(client, auth_headers(user), product.id, rating, difficulty)
        viewer = await make_user()

        response = await client.get("/api/v1/feedback/stats", headers=auth_headers(viewer))

        assert response.status_code == 200
        stats = response.json()
        assert stats["total_feedback"] == 3
        assert stats["average_rating"] == 4.3
        assert stats["rating_distribution"] == {"1": 0, "2": 0, "3": 0, "4": 2, "5": 1}
        assert stats["difficulty_distribution"] == {
            "easy": 2,
            "just-right": 0,
            "challenging": 0,
            "difficult": 1,
        }

    @pytest.mark.asyncio
    async def test_empty_stats(self, client, make_user, auth_headers):
        viewer = await make_user()

        stats = (await client.get("/api/v1/feedback/stats", headers=auth_headers(viewer))).json()

        assert stats["total_feedback"] == 0
        assert stats["average_rating"] == 0.0


class TestAdminFeedback:
    """Tests for the admin-only feedback routes."""

    @pytest.mark.asyncio
    async def test_filter_and_delete(self, client, make_user, make_product, auth_headers):
        admin = await make_user(role=UserRole.ADMIN)
        product = await make_product()
        low = await make_user()
        high = await make_user()
        await _submit(client, auth_headers(low), product.id, rating=2)
        await _submit(client, auth_headers(high), product.id, rating=5)

        filtered = await client.get(
            "/api/v1/feedback/all", params={"rating": 2}, headers=auth_headers(admin)
        )
        assert [item["rating"] for item in filtered.json()] == [2]

        feedback_id = filtered.json()[0]["id"]
        forbidden = await client.delete(f"/api/v1/feedback/{feedback_id}", headers=auth_headers(low))
        deleted = await client.delete(f"/api/v1/feedback/{feedback_id}", headers=auth_headers(admin))

        assert forbidden.status_code == 403
        assert deleted.status_code == 204
        remaining = await client.get(f"/api/v1/feedback/course/{product.id}", headers=auth_headers(low))
        assert [item["rating"] for item in remaining.json()] == [5]
