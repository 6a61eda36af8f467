"""Sector / sub-category notification subscriptions.

At most one ACTIVE subscription may exist per (user, sector, sub-category).
The partial expression index below enforces it in the store; a null
sub-category compares equal to another null through the coalesce.
"""

from __future__ import annotations

import enum
import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, Enum, ForeignKey, Index, String, Uuid, func, literal, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from agora.core.base import Base, CreatedAtMixin, UpdatedAtMixin, utcnow

if TYPE_CHECKING:
    from agora.models.user import User


class SubscriptionStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    EXPIRED = "EXPIRED"


class Subscription(Base, CreatedAtMixin, UpdatedAtMixin):
    __tablename__ = "subscriptions"

    sub_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True
    )
    gics_sector: Mapped[str] = mapped_column(String(128), nullable=False)
    gics_sub_category: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    status: Mapped[SubscriptionStatus] = mapped_column(
        Enum(SubscriptionStatus, name="subscription_status_enum"),
        nullable=False,
        default=SubscriptionStatus.ACTIVE,
    )
    sub_start: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    sub_end: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    user: Mapped["User"] = relationship("User", lazy="joined")

    def __repr__(self) -> str:
        return (
            f"<Subscription(sub_id={self.sub_id}, sector={self.gics_sector}, "
            f"sub_category={self.gics_sub_category}, status={self.status.value})>"
        )


ACTIVE_TUPLE_INDEX = "uq_subscriptions_active_tuple"

Index(
    ACTIVE_TUPLE_INDEX,
    Subscription.user_id,
    Subscription.gics_sector,
    func.coalesce(Subscription.gics_sub_category, literal("")),
    unique=True,
    postgresql_where=text("status = 'ACTIVE'"),
    sqlite_where=text("status = 'ACTIVE'"),
)
