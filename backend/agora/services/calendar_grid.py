"""Calendar grid construction (pure, no I/O).

Turns a flat list of events (each carrying its RSVP list) plus the company
catalog into:

- a month grid: one row per catalog company, events bucketed by the UTC
  calendar date of their start, with the requesting user's own RSVP
  overlaid and only aggregate counts for everyone else;
- a week grid: seven Monday..Sunday buckets of the events the requesting
  user has responded to.

Dates are never shifted across timezones: the bucket key is the date part of
the stored (UTC) start timestamp.
"""

from __future__ import annotations

import uuid
from collections import Counter, defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, timezone
from typing import Iterable, Optional, Sequence

from agora.models.company import GicsCompany
from agora.models.event import Event, EventType
from agora.models.rsvp import Rsvp, RsvpStatus


UTC = timezone.utc

DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


@dataclass(frozen=True, slots=True)
class DateRange:
    """Inclusive calendar-day range. `start > end` is kept as given and is empty."""

    start: date
    end: date

    def days(self) -> list[date]:
        out: list[date] = []
        current = self.start
        while current <= self.end:
            out.append(current)
            current += timedelta(days=1)
        return out

    def bounds(self) -> tuple[datetime, datetime]:
        """Timestamp window covering every instant of the range, UTC."""
        return (
            datetime.combine(self.start, time.min, tzinfo=UTC),
            datetime.combine(self.end, time.max, tzinfo=UTC),
        )


@dataclass(frozen=True, slots=True)
class CalendarFilter:
    gics_sector: Optional[str] = None
    event_type: Optional[EventType] = None
    tickers: tuple[str, ...] = ()


@dataclass(slots=True)
class CalendarEntry:
    event: Event
    user_rsvp: Optional[Rsvp]
    rsvp_counts: dict[str, int]


@dataclass(slots=True)
class CompanyRow:
    company: GicsCompany
    events_by_date: dict[str, list[CalendarEntry]] = field(default_factory=dict)


@dataclass(slots=True)
class CalendarStatistics:
    total_events: int
    user_rsvps: int
    events_by_type: dict[str, int]


@dataclass(slots=True)
class CalendarGrid:
    rows: list[CompanyRow]
    date_axis: list[date]
    date_range: DateRange
    statistics: CalendarStatistics


@dataclass(slots=True)
class WeekDay:
    date: date
    day_name: str
    events: list[CalendarEntry]


@dataclass(slots=True)
class WeekGrid:
    days: list[WeekDay]
    week_range: DateRange


def month_range(today: date) -> DateRange:
    first = today.replace(day=1)
    next_first = (first + timedelta(days=32)).replace(day=1)
    return DateRange(start=first, end=next_first - timedelta(days=1))


def resolve_date_range(start: Optional[date], end: Optional[date], *, today: date) -> DateRange:
    """Fill missing bounds from the current month; given bounds are used verbatim."""
    default = month_range(today)
    return DateRange(start=start or default.start, end=end or default.end)


def week_range(anchor: date) -> DateRange:
    monday = anchor - timedelta(days=anchor.weekday())
    return DateRange(start=monday, end=monday + timedelta(days=6))


def as_utc(ts: datetime) -> datetime:
    # Some drivers hand back naive values for timestamptz columns.
    if ts.tzinfo is None:
        return ts.replace(tzinfo=UTC)
    return ts.astimezone(UTC)


def event_date(event: Event) -> date:
    return as_utc(event.start_date).date()


def _status_key(status: RsvpStatus | str) -> str:
    return getattr(status, "value", str(status))


def _own_rsvp(event: Event, user_id: uuid.UUID) -> Optional[Rsvp]:
    for rsvp in event.rsvps or ():
        if rsvp.user_id == user_id:
            return rsvp
    return None


def _entry(event: Event, user_id: uuid.UUID) -> CalendarEntry:
    counts = Counter(_status_key(r.status) for r in event.rsvps or ())
    return CalendarEntry(
        event=event,
        user_rsvp=_own_rsvp(event, user_id),
        rsvp_counts={s.value: counts.get(s.value, 0) for s in RsvpStatus},
    )


def _event_tickers(event: Event) -> set[str]:
    tickers: set[str] = set()
    if event.ticker_symbol:
        tickers.add(event.ticker_symbol)
    linked = event.gics_company
    if linked is not None and linked.ticker_symbol:
        tickers.add(linked.ticker_symbol)
    return tickers


def compute_statistics(events: Sequence[Event], user_id: uuid.UUID) -> CalendarStatistics:
    by_type: Counter[str] = Counter(_status_key(e.event_type) for e in events)
    own = sum(1 for e in events for r in e.rsvps or () if r.user_id == user_id)
    return CalendarStatistics(total_events=len(events), user_rsvps=own, events_by_type=dict(by_type))


def build_calendar_grid(
    events: Sequence[Event],
    companies: Iterable[GicsCompany],
    *,
    user_id: uuid.UUID,
    date_range: DateRange,
) -> CalendarGrid:
    """Company x date grid.

    Row order follows `companies` and every company gets a row, with or
    without events. The date axis lists every day of the range regardless of
    whether any event falls on it.
    """
    by_ticker: dict[str, list[Event]] = defaultdict(list)
    for event in events:
        for ticker in _event_tickers(event):
            by_ticker[ticker].append(event)

    rows: list[CompanyRow] = []
    for company in companies:
        row = CompanyRow(company=company)
        for event in by_ticker.get(company.ticker_symbol, ()):
            key = event_date(event).isoformat()
            row.events_by_date.setdefault(key, []).append(_entry(event, user_id))
        rows.append(row)

    return CalendarGrid(
        rows=rows,
        date_axis=date_range.days(),
        date_range=date_range,
        statistics=compute_statistics(events, user_id),
    )


def build_week_grid(events: Sequence[Event], *, user_id: uuid.UUID, anchor: date) -> WeekGrid:
    """Seven day buckets (Monday first) of events the user has an RSVP for."""
    week = week_range(anchor)
    buckets: dict[date, list[CalendarEntry]] = {d: [] for d in week.days()}
    for event in events:
        day = event_date(event)
        if day not in buckets:
            continue
        entry = _entry(event, user_id)
        if entry.user_rsvp is None:
            continue
        buckets[day].append(entry)

    days = [WeekDay(date=d, day_name=DAY_NAMES[d.weekday()], events=buckets[d]) for d in week.days()]
    return WeekGrid(days=days, week_range=week)
