"""Calendar aggregation: fetch rows, then hand them to the pure grid builders."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

from sqlalchemy.orm import Session

from agora.core.base import utcnow
from agora.models.subscription import Subscription
from agora.repositories.company_repo import CompanyRepository
from agora.repositories.event_repo import EventFilter, EventRepository
from agora.services.calendar_grid import (
    CalendarFilter,
    CalendarGrid,
    WeekGrid,
    build_calendar_grid,
    build_week_grid,
    resolve_date_range,
    week_range,
)
from agora.services.subscription_deduplicator import SubscriptionDeduplicator


@dataclass(slots=True)
class CalendarView:
    grid: CalendarGrid
    active_subscriptions: Sequence[Subscription]


class CalendarAggregator:
    def __init__(self, session: Session) -> None:
        self._events = EventRepository(session)
        self._companies = CompanyRepository(session)
        self._subscriptions = SubscriptionDeduplicator(session)

    async def month(
        self,
        user_id: uuid.UUID,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        filters: CalendarFilter = CalendarFilter(),
        today: Optional[date] = None,
    ) -> CalendarView:
        date_range = resolve_date_range(start, end, today=today or utcnow().date())
        lower, upper = date_range.bounds()

        events = await self._events.search(
            EventFilter(
                gics_sector=filters.gics_sector,
                event_type=filters.event_type,
                tickers=filters.tickers,
                starts_from=lower,
                starts_until=upper,
            )
        )
        companies = await self._companies.list_gics_companies()
        grid = build_calendar_grid(events, companies, user_id=user_id, date_range=date_range)

        # Returned alongside the grid; the grid itself is never narrowed by them.
        active = await self._subscriptions.list_active(user_id)
        return CalendarView(grid=grid, active_subscriptions=active)

    async def week(self, user_id: uuid.UUID, *, anchor: Optional[date] = None) -> WeekGrid:
        anchor = anchor or utcnow().date()
        lower, upper = week_range(anchor).bounds()
        events = await self._events.search(
            EventFilter(starts_from=lower, starts_until=upper, rsvp_user_id=user_id)
        )
        return build_week_grid(events, user_id=user_id, anchor=anchor)
