from __future__ import annotations

import enum
import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import CheckConstraint, DateTime, Enum, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from agora.core.base import Base, CreatedAtMixin, UpdatedAtMixin

if TYPE_CHECKING:
    from agora.models.company import GicsCompany, UserCompany
    from agora.models.rsvp import Rsvp


class EventType(str, enum.Enum):
    EARNINGS_CALL = "EARNINGS_CALL"
    INVESTOR_MEETING = "INVESTOR_MEETING"
    CONFERENCE = "CONFERENCE"
    ROADSHOW = "ROADSHOW"
    ANALYST_DAY = "ANALYST_DAY"
    PRODUCT_LAUNCH = "PRODUCT_LAUNCH"
    OTHER = "OTHER"


class Event(Base, CreatedAtMixin, UpdatedAtMixin):
    """A scheduled IR occurrence, owned collectively by IR admins."""

    __tablename__ = "events"

    event_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    event_name: Mapped[str] = mapped_column(String(255), nullable=False)
    event_type: Mapped[EventType] = mapped_column(Enum(EventType, name="event_type_enum"), nullable=False)

    ticker_symbol: Mapped[Optional[str]] = mapped_column(
        String(16), ForeignKey("gics_companies.ticker_symbol", ondelete="SET NULL"), nullable=True
    )
    gics_sector: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    gics_sub_sector: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)

    location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    host_company: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    company_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("user_companies.company_id", ondelete="SET NULL"), nullable=True
    )

    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    gics_company: Mapped[Optional["GicsCompany"]] = relationship("GicsCompany", lazy="joined")
    user_company: Mapped[Optional["UserCompany"]] = relationship("UserCompany", lazy="joined")
    rsvps: Mapped[list["Rsvp"]] = relationship(
        "Rsvp",
        back_populates="event",
        lazy="selectin",
        passive_deletes=True,
        order_by="Rsvp.created_at.desc()",
    )

    __table_args__ = (
        CheckConstraint("end_date IS NULL OR end_date > start_date", name="ck_events_end_after_start"),
        Index("ix_events_start_date", "start_date"),
        Index("ix_events_ticker_symbol", "ticker_symbol"),
        Index("ix_events_gics_sector", "gics_sector"),
    )

    def __repr__(self) -> str:
        return f"<Event(event_id={self.event_id}, name={self.event_name}, start={self.start_date})>"
