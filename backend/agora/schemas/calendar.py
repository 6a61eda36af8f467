"""Calendar grid / week view response shapes."""

from __future__ import annotations

import datetime as dt
from typing import Optional

from pydantic import Field

from agora.schemas.base import ApiModel
from agora.schemas.company import CalendarCompany
from agora.schemas.event import EventRead
from agora.schemas.rsvp import RsvpRead
from agora.schemas.subscription import SubscriptionRead
from agora.services.calendar_grid import CalendarEntry, CalendarGrid, DateRange, WeekGrid


class CalendarEvent(EventRead):
    """An event as placed on the grid: own RSVP plus aggregate counts only."""

    user_rsvp: Optional[RsvpRead] = None
    rsvp_counts: dict[str, int] = Field(default_factory=dict)

    @classmethod
    def from_entry(cls, entry: CalendarEntry) -> "CalendarEvent":
        base = EventRead.model_validate(entry.event)
        return cls(
            **dict(base),
            user_rsvp=RsvpRead.model_validate(entry.user_rsvp) if entry.user_rsvp is not None else None,
            rsvp_counts=entry.rsvp_counts,
        )


class CalendarRow(ApiModel):
    company: CalendarCompany
    events_by_date: dict[str, list[CalendarEvent]]


class DateRangeRead(ApiModel):
    start: dt.date
    end: dt.date

    @classmethod
    def from_range(cls, value: DateRange) -> "DateRangeRead":
        return cls(start=value.start, end=value.end)


class CalendarStatisticsRead(ApiModel):
    total_events: int
    user_rsvps: int
    events_by_type: dict[str, int]


class CalendarGridResponse(ApiModel):
    grid: list[CalendarRow]
    date_axis: list[dt.date]
    date_range: DateRangeRead
    active_subscriptions: list[SubscriptionRead]
    statistics: CalendarStatisticsRead

    @classmethod
    def build(cls, grid: CalendarGrid, active_subscriptions) -> "CalendarGridResponse":
        rows = [
            CalendarRow(
                company=CalendarCompany.model_validate(row.company),
                events_by_date={
                    day: [CalendarEvent.from_entry(e) for e in entries] for day, entries in row.events_by_date.items()
                },
            )
            for row in grid.rows
        ]
        return cls(
            grid=rows,
            date_axis=grid.date_axis,
            date_range=DateRangeRead.from_range(grid.date_range),
            active_subscriptions=[SubscriptionRead.model_validate(s) for s in active_subscriptions],
            statistics=CalendarStatisticsRead(
                total_events=grid.statistics.total_events,
                user_rsvps=grid.statistics.user_rsvps,
                events_by_type=grid.statistics.events_by_type,
            ),
        )


class WeekDayRead(ApiModel):
    date: dt.date
    day_name: str
    events: list[CalendarEvent]


class WeekGridResponse(ApiModel):
    week_data: list[WeekDayRead]
    week_range: DateRangeRead

    @classmethod
    def build(cls, week: WeekGrid) -> "WeekGridResponse":
        return cls(
            week_data=[
                WeekDayRead(date=d.date, day_name=d.day_name, events=[CalendarEvent.from_entry(e) for e in d.events])
                for d in week.days
            ],
            week_range=DateRangeRead.from_range(week.week_range),
        )
