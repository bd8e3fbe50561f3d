"""
Database Enums

Python Enums that map to database ENUM types.
"""

import enum


class UserRole(str, enum.Enum):
    """User role enumeration."""
    USER = "user"
    MANAGER = "manager"
    ADMIN = "admin"


class OrderStatus(str, enum.Enum):
    """Order lifecycle status."""
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Difficulty(str, enum.Enum):
    """Perceived course difficulty reported with feedback."""
    EASY = "easy"
    JUST_RIGHT = "just-right"
    CHALLENGING = "challenging"
    DIFFICULT = "difficult"


class ActivityAction(str, enum.Enum):
    """Audit log action tags."""
    LOGIN = "login"
    LOGOUT = "logout"
    COURSE_ENROLLED = "course_enrolled"
    COURSE_COMPLETED = "course_completed"
    FEEDBACK_SUBMITTED = "feedback_submitted"
    MESSAGE_SENT = "message_sent"
    MESSAGE_RECEIVED = "message_received"
    PROFILE_UPDATED = "profile_updated"
    PASSWORD_CHANGED = "password_changed"
