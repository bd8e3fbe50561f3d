"""
Authorization Policy

Every role gate in the API is declared here instead of inside handlers.

Two tables:
- PERMISSIONS maps (resource, action) to the roles allowed to perform it.
  A pair that is not listed is open to any authenticated user.
- MESSAGE_RECIPIENTS maps a sender role to the recipient roles it may address.
"""

from typing import Dict, FrozenSet, Tuple

from app.models.enums import UserRole


ANY_ROLE: FrozenSet[UserRole] = frozenset(UserRole)
ADMIN_ONLY: FrozenSet[UserRole] = frozenset({UserRole.ADMIN})
STAFF: FrozenSet[UserRole] = frozenset({UserRole.MANAGER, UserRole.ADMIN})


PERMISSIONS: Dict[Tuple[str, str], FrozenSet[UserRole]] = {
    ("products", "create"): ADMIN_ONLY,
    ("products", "update"): ADMIN_ONLY,
    ("products", "delete"): ADMIN_ONLY,
    ("categories", "create"): ADMIN_ONLY,
    ("categories", "update"): ADMIN_ONLY,
    ("categories", "delete"): ADMIN_ONLY,
    ("users", "list"): STAFF,
    ("users", "read"): STAFF,
    ("users", "update"): ADMIN_ONLY,
    ("users", "delete"): ADMIN_ONLY,
    ("orders", "list_all"): ADMIN_ONLY,
    ("orders", "update_status"): ADMIN_ONLY,
    ("feedback", "list_all"): ADMIN_ONLY,
    ("feedback", "delete"): ADMIN_ONLY,
    ("activities", "read"): ADMIN_ONLY,
    # Acting on another user's enrollment
    ("enrollments", "manage_any"): ADMIN_ONLY,
}


MESSAGE_RECIPIENTS: Dict[UserRole, FrozenSet[UserRole]] = {
    UserRole.USER: frozenset({UserRole.ADMIN}),
    UserRole.MANAGER: frozenset({UserRole.ADMIN}),
    UserRole.ADMIN: frozenset({UserRole.USER, UserRole.MANAGER}),
}

_MESSAGE_DENIALS: Dict[UserRole, str] = {
    UserRole.USER: "Users can only message admins",
    UserRole.MANAGER: "Managers can only message admins",
    UserRole.ADMIN: "Admins cannot message other admins",
}


def allowed_roles(resource: str, action: str) -> FrozenSet[UserRole]:
    """Roles allowed to perform `action` on `resource`."""
    return PERMISSIONS.get((resource, action), ANY_ROLE)


def is_allowed(role: UserRole, resource: str, action: str) -> bool:
    """Check a role against the permission table."""
    return role in allowed_roles(resource, action)


def can_message(sender_role: UserRole, recipient_role: UserRole) -> bool:
    """Check whether a sender role may address a recipient role."""
    return recipient_role in MESSAGE_RECIPIENTS.get(sender_role, frozenset())


def messaging_denial_reason(sender_role: UserRole) -> str:
    """Error text for a rejected message from `sender_role`."""
    return _MESSAGE_DENIALS.get(sender_role, "Not allowed to message this user")
