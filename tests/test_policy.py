"""
Authorization Policy Tests
"""

import pytest

from app.core import policy
from app.models.enums import UserRole


class TestPermissions:
    """Tests for the (resource, action) permission table."""

    @pytest.mark.parametrize("action", ["create", "update", "delete"])
    def test_product_writes_are_admin_only(self, action):
        assert policy.is_allowed(UserRole.ADMIN, "products", action) is True
        assert policy.is_allowed(UserRole.MANAGER, "products", action) is False
        assert policy.is_allowed(UserRole.USER, "products", action) is False

    def test_managers_can_list_users(self):
        assert policy.is_allowed(UserRole.MANAGER, "users", "list") is True
        assert policy.is_allowed(UserRole.USER, "users", "list") is False

    def test_only_admins_update_users(self):
        assert policy.is_allowed(UserRole.MANAGER, "users", "update") is False
        assert policy.is_allowed(UserRole.ADMIN, "users", "update") is True

    def test_unlisted_pair_is_open(self):
        """Verify a pair missing from the table admits every role."""
        for role in UserRole:
            assert policy.is_allowed(role, "enrollments", "create") is True


class TestMessaging:
    """Tests for the sender -> recipient role table."""

    def test_users_and_managers_message_admins_only(self):
        for sender in (UserRole.USER, UserRole.MANAGER):
            assert policy.can_message(sender, UserRole.ADMIN) is True
            assert policy.can_message(sender, UserRole.USER) is False
            assert policy.can_message(sender, UserRole.MANAGER) is False

    def test_admins_message_users_and_managers(self):
        assert policy.can_message(UserRole.ADMIN, UserRole.USER) is True
        assert policy.can_message(UserRole.ADMIN, UserRole.MANAGER) is True
        assert policy.can_message(UserRole.ADMIN, UserRole.ADMIN) is False

    def test_denial_reasons(self):
        assert policy.messaging_denial_reason(UserRole.USER) == "Users can only message admins"
        assert policy.messaging_denial_reason(UserRole.ADMIN) == "Admins cannot message other admins"
