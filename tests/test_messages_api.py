"""
Message Endpoint Tests

Tests for role-gated messaging.
"""

import pytest

from app.models import UserRole


def _message(to, subject="Hello"):
    return {"to": str(to), "subject": subject, "content": "Can you help me with the course?"}


class TestSendMessage:
    """Tests for POST /messages."""

    @pytest.mark.asyncio
    async def test_user_to_user_forbidden(self, client, make_user, auth_headers):
        sender = await make_user()
        recipient = await make_user()

        response = await client.post(
            "/api/v1/messages", json=_message(recipient.id), headers=auth_headers(sender)
        )

        assert response.status_code == 403
        assert response.json()["detail"] == "Users can only message admins"

    @pytest.mark.asyncio
    async def test_user_to_admin_allowed(self, client, make_user, auth_headers):
        sender = await make_user()
        admin = await make_user(role=UserRole.ADMIN)

        response = await client.post(
            "/api/v1/messages", json=_message(admin.id), headers=auth_headers(sender)
        )

        assert response.status_code == 201
        data = response.json()
        assert data["sender"]["id"] == str(sender.id)
        assert data["recipient"]["id"] == str(admin.id)
        assert data["is_read"] is False

    @pytest.mark.asyncio
    async def test_admin_to_admin_forbidden(self, client, make_user, auth_headers):
        admin = await make_user(role=UserRole.ADMIN)
        other_admin = await make_user(role=UserRole.ADMIN)

        response = await client.post(
            "/api/v1/messages", json=_message(other_admin.id), headers=auth_headers(admin)
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_unknown_recipient_is_404(self, client, make_user, auth_headers):
        import uuid

        sender = await make_user()

        response = await client.post(
            "/api/v1/messages", json=_message(uuid.uuid4()), headers=auth_headers(sender)
        )

        assert response.status_code == 404


class TestReadMessages:
    """Tests for inbox, read tracking and deletion."""

    @pytest.mark.asyncio
    async def test_recipient_opening_marks_read(self, client, make_user, auth_headers):
        sender = await make_user()
        admin = await make_user(role=UserRole.ADMIN)
        sent = await client.post(
            "/api/v1/messages", json=_message(admin.id), headers=auth_headers(sender)
        )
        message_id = sent.json()["id"]

        unread = await client.get(
            "/api/v1/messages/received", params={"unread_only": "true"}, headers=auth_headers(admin)
        )
        assert [m["id"] for m in unread.json()] == [message_id]

        # The sender viewing it does not mark it read
        await client.get(f"/api/v1/messages/{message_id}", headers=auth_headers(sender))
        opened = await client.get(f"/api/v1/messages/{message_id}", headers=auth_headers(admin))

        assert opened.json()["is_read"] is True
        assert opened.json()["read_at"] is not None
        unread = await client.get(
            "/api/v1/messages/received", params={"unread_only": "true"}, headers=auth_headers(admin)
        )
        assert unread.json() == []

    @pytest.mark.asyncio
    async def test_outsider_cannot_view(self, client, make_user, auth_headers):
        sender = await make_user()
        admin = await make_user(role=UserRole.ADMIN)
        outsider = await make_user()
        sent = await client.post(
            "/api/v1/messages", json=_message(admin.id), headers=auth_headers(sender)
        )

        response = await client.get(f"/api/v1/messages/{sent.json()['id']}", headers=auth_headers(outsider))

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_only_recipient_marks_read(self, client, make_user, auth_headers):
        sender = await make_user()
        admin = await make_user(role=UserRole.ADMIN)
        sent = await client.post(
            "/api/v1/messages", json=_message(admin.id), headers=auth_headers(sender)
        )
        message_id = sent.json()["id"]

        by_sender = await client.put(f"/api/v1/messages/{message_id}/read", headers=auth_headers(sender))
        by_recipient = await client.put(f"/api/v1/messages/{message_id}/read", headers=auth_headers(admin))

        assert by_sender.status_code == 403
        assert by_recipient.status_code == 200
        assert by_recipient.json()["is_read"] is True

    @pytest.mark.asyncio
    async def test_sent_and_delete(self, client, make_user, auth_headers):
        sender = await make_user()
        admin = await make_user(role=UserRole.ADMIN)
        sent = await client.post(
            "/api/v1/messages", json=_message(admin.id), headers=auth_headers(sender)
        )

        outbox = await client.get("/api/v1/messages/sent", headers=auth_headers(sender))
        assert len(outbox.json()) == 1

        response = await client.delete(f"/api/v1/messages/{sent.json()['id']}", headers=auth_headers(admin))
        assert response.status_code == 204

        outbox = await client.get("/api/v1/messages/sent", headers=auth_headers(sender))
        assert outbox.json() == []


class TestMessageableUsers:
    """Tests for GET /messages/users."""

    @pytest.mark.asyncio
    async def test_user_sees_admins_only(self, client, make_user, auth_headers):
        learner = await make_user(name="Learner")
        await make_user(name="Other Learner")
        await make_user(role=UserRole.MANAGER, name="Manager")
        await make_user(role=UserRole.ADMIN, name="Zed Admin")
        await make_user(role=UserRole.ADMIN, name="Amy Admin")

        response = await client.get("/api/v1/messages/users", headers=auth_headers(learner))

        assert [u["name"] for u in response.json()] == ["Amy Admin", "Zed Admin"]

    @pytest.mark.asyncio
    async def test_admin_sees_users_and_managers(self, client, make_user, auth_headers):
        admin = await make_user(role=UserRole.ADMIN, name="Admin")
        await make_user(role=UserRole.ADMIN, name="Other Admin")
        await make_user(name="Bea")
        await make_user(role=UserRole.MANAGER, name="Al")

        response = await client.get("/api/v1/messages/users", headers=auth_headers(admin))

        assert [u["name"] for u in response.json()] == ["Al", "Bea"]
