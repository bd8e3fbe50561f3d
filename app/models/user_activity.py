"""
User Activity Model

Append-only audit log. Rows are never updated or deleted by application code.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import JSON, DateTime, Enum, ForeignKey, Index, Integer, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base
from app.models.enums import ActivityAction

if TYPE_CHECKING:
    from app.models.user import User


class UserActivity(Base):
    """
    One audited action by one user.
    
    Attributes:
        user_id: Actor, or NULL once the account is deleted.
        action: Enumerated action tag.
        details: Human-readable summary.
        metadata_: Free-form JSON payload (column name "metadata").
        ip_address: Client address when known.
        user_agent: Client user agent when known.
    """

    __tablename__ = "user_activities"

    __table_args__ = (
        Index("ix_user_activities_user_created", "user_id", "created_at"),
        Index("ix_user_activities_action_created", "action", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Survives account deletion with the actor cleared
    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    action: Mapped[ActivityAction] = mapped_column(
        Enum(ActivityAction, name="activity_action", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    details: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # "metadata" is reserved on declarative classes
    metadata_: Mapped[dict] = mapped_column("metadata", JSON, default=dict, nullable=False)
    ip_address: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    user_agent: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    user: Mapped[Optional["User"]] = relationship("User", lazy="selectin")

    def __repr__(self) -> str:
        return f"<UserActivity(id={self.id}, user_id={self.user_id}, action={self.action})>"
