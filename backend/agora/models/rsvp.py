from __future__ import annotations

import enum
import uuid
from typing import TYPE_CHECKING

from sqlalchemy import Enum, ForeignKey, Index, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from agora.core.base import Base, CreatedAtMixin, UpdatedAtMixin

if TYPE_CHECKING:
    from agora.models.event import Event
    from agora.models.user import User


class RsvpStatus(str, enum.Enum):
    ACCEPTED = "ACCEPTED"
    DECLINED = "DECLINED"
    TENTATIVE = "TENTATIVE"
    PENDING = "PENDING"


class Rsvp(Base, CreatedAtMixin, UpdatedAtMixin):
    """A user's response to an event; one row per (user, event)."""

    __tablename__ = "rsvps"

    rsvp_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False
    )
    event_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("events.event_id", ondelete="CASCADE"), nullable=False
    )
    status: Mapped[RsvpStatus] = mapped_column(Enum(RsvpStatus, name="rsvp_status_enum"), nullable=False)

    user: Mapped["User"] = relationship("User", lazy="joined")
    event: Mapped["Event"] = relationship("Event", back_populates="rsvps")

    __table_args__ = (
        UniqueConstraint("user_id", "event_id", name="uq_rsvps_user_event"),
        Index("ix_rsvps_event_id", "event_id"),
    )

    def __repr__(self) -> str:
        return f"<Rsvp(user_id={self.user_id}, event_id={self.event_id}, status={self.status.value})>"
