"""
Application-level Tests

Health routes, error handlers and user administration.
"""

import pytest

from app.models import UserRole


class TestHealth:

    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_root(self, client):
        response = await client.get("/")

        assert response.json()["message"] == "Welcome to MindMeld API"


class TestUserAdministration:
    """Tests for /users."""

    @pytest.mark.asyncio
    async def test_manager_lists_but_cannot_update(self, client, make_user, auth_headers):
        manager = await make_user(role=UserRole.MANAGER)
        learner = await make_user()

        listed = await client.get("/api/v1/users", headers=auth_headers(manager))
        update = await client.put(
            f"/api/v1/users/{learner.id}", json={"role": "admin"}, headers=auth_headers(manager)
        )

        assert listed.status_code == 200
        assert len(listed.json()) == 2
        assert update.status_code == 403

    @pytest.mark.asyncio
    async def test_admin_promotes_user(self, client, make_user, auth_headers):
        admin = await make_user(role=UserRole.ADMIN)
        learner = await make_user()

        response = await client.put(
            f"/api/v1/users/{learner.id}", json={"role": "manager"}, headers=auth_headers(admin)
        )

        assert response.status_code == 200
        assert response.json()["role"] == "manager"

    @pytest.mark.asyncio
    async def test_admin_email_conflict(self, client, make_user, auth_headers):
        admin = await make_user(role=UserRole.ADMIN)
        await make_user(email="taken@example.com")
        learner = await make_user()

        response = await client.put(
            f"/api/v1/users/{learner.id}",
            json={"email": "taken@example.com"},
            headers=auth_headers(admin),
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_deleted_user_token_rejected(self, client, make_user, auth_headers):
        admin = await make_user(role=UserRole.ADMIN)
        learner = await make_user()

        response = await client.delete(f"/api/v1/users/{learner.id}", headers=auth_headers(admin))
        me = await client.get("/api/v1/auth/me", headers=auth_headers(learner))

        assert response.status_code == 204
        assert me.status_code == 401
