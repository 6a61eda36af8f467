from __future__ import annotations

import uuid
from datetime import date, datetime, timedelta, timezone

from agora.models import Event, EventType, GicsCompany, Rsvp, RsvpStatus
from agora.services.calendar_grid import (
    DateRange,
    build_calendar_grid,
    build_week_grid,
    month_range,
    resolve_date_range,
    week_range,
)


UTC = timezone.utc
ME = uuid.uuid4()
OTHER = uuid.uuid4()


def _company(ticker: str, name: str) -> GicsCompany:
    return GicsCompany(ticker_symbol=ticker, company_name=name, gics_sector="Energy", gics_sub_category="Oil & Gas")


def _event(start: datetime, *, ticker: str | None = "AAA", event_type=EventType.EARNINGS_CALL, rsvps=()) -> Event:
    ev = Event(event_id=uuid.uuid4(), event_name="e", event_type=event_type, ticker_symbol=ticker, start_date=start)
    ev.rsvps = [Rsvp(rsvp_id=uuid.uuid4(), user_id=u, event_id=ev.event_id, status=s) for u, s in rsvps]
    return ev


def test_date_axis_is_inclusive():
    rng = DateRange(date(2024, 3, 1), date(2024, 3, 31))
    axis = rng.days()
    assert len(axis) == 31
    assert axis[0] == date(2024, 3, 1)
    assert axis[-1] == date(2024, 3, 31)


def test_inverted_range_has_empty_axis():
    assert DateRange(date(2024, 3, 10), date(2024, 3, 1)).days() == []


def test_month_range_handles_leap_february():
    rng = month_range(date(2024, 2, 14))
    assert rng == DateRange(date(2024, 2, 1), date(2024, 2, 29))
    assert month_range(date(2023, 12, 31)) == DateRange(date(2023, 12, 1), date(2023, 12, 31))


def test_missing_bounds_default_independently():
    today = date(2024, 5, 20)
    assert resolve_date_range(None, None, today=today) == DateRange(date(2024, 5, 1), date(2024, 5, 31))
    assert resolve_date_range(date(2024, 4, 15), None, today=today) == DateRange(date(2024, 4, 15), date(2024, 5, 31))
    assert resolve_date_range(None, date(2024, 5, 10), today=today) == DateRange(date(2024, 5, 1), date(2024, 5, 10))


def test_bounds_cover_whole_last_day():
    lower, upper = DateRange(date(2024, 3, 1), date(2024, 3, 31)).bounds()
    assert lower == datetime(2024, 3, 1, tzinfo=UTC)
    assert upper == datetime(2024, 3, 31, 23, 59, 59, 999999, tzinfo=UTC)


def test_one_row_per_catalog_company_even_without_events():
    companies = [_company("AAA", "Alpha"), _company("BBB", "Beta"), _company("CCC", "Gamma")]
    grid = build_calendar_grid(
        [_event(datetime(2024, 3, 5, 14, tzinfo=UTC))],
        companies,
        user_id=ME,
        date_range=DateRange(date(2024, 3, 1), date(2024, 3, 31)),
    )
    assert [r.company.ticker_symbol for r in grid.rows] == ["AAA", "BBB", "CCC"]
    assert list(grid.rows[0].events_by_date) == ["2024-03-05"]
    assert grid.rows[1].events_by_date == {}


def test_empty_catalog_still_has_date_axis():
    grid = build_calendar_grid([], [], user_id=ME, date_range=DateRange(date(2024, 3, 1), date(2024, 3, 7)))
    assert grid.rows == []
    assert len(grid.date_axis) == 7
    assert grid.statistics.total_events == 0


def test_bucket_key_is_utc_date_of_start():
    late = _event(datetime(2024, 3, 5, 23, 30, tzinfo=UTC))
    # 02:00 at +05:00 is 21:00 UTC the previous day.
    offset = _event(datetime(2024, 3, 6, 2, 0, tzinfo=timezone(timedelta(hours=5))))
    naive = _event(datetime(2024, 3, 7, 0, 15))
    grid = build_calendar_grid(
        [late, offset, naive],
        [_company("AAA", "Alpha")],
        user_id=ME,
        date_range=DateRange(date(2024, 3, 1), date(2024, 3, 31)),
    )
    buckets = grid.rows[0].events_by_date
    assert sorted(buckets) == ["2024-03-05", "2024-03-07"]
    assert len(buckets["2024-03-05"]) == 2


def test_event_matched_through_linked_company():
    alpha = _company("AAA", "Alpha")
    ev = _event(datetime(2024, 3, 5, 14, tzinfo=UTC), ticker=None)
    ev.gics_company = alpha
    grid = build_calendar_grid([ev], [alpha], user_id=ME, date_range=DateRange(date(2024, 3, 1), date(2024, 3, 31)))
    assert "2024-03-05" in grid.rows[0].events_by_date


def test_entries_carry_own_rsvp_and_counts_only():
    ev = _event(
        datetime(2024, 3, 5, 14, tzinfo=UTC),
        rsvps=[(ME, RsvpStatus.TENTATIVE), (OTHER, RsvpStatus.ACCEPTED)],
    )
    bare = _event(datetime(2024, 3, 5, 18, tzinfo=UTC), rsvps=[(OTHER, RsvpStatus.DECLINED)])
    grid = build_calendar_grid(
        [ev, bare], [_company("AAA", "Alpha")], user_id=ME, date_range=DateRange(date(2024, 3, 1), date(2024, 3, 31))
    )
    first, second = grid.rows[0].events_by_date["2024-03-05"]
    assert first.user_rsvp is not None and first.user_rsvp.user_id == ME
    assert first.rsvp_counts == {"ACCEPTED": 1, "DECLINED": 0, "TENTATIVE": 1, "PENDING": 0}
    assert second.user_rsvp is None
    assert second.rsvp_counts["DECLINED"] == 1


def test_statistics():
    events = [
        _event(datetime(2024, 3, 5, tzinfo=UTC), rsvps=[(ME, RsvpStatus.ACCEPTED)]),
        _event(datetime(2024, 3, 6, tzinfo=UTC), event_type=EventType.ROADSHOW, rsvps=[(OTHER, RsvpStatus.ACCEPTED)]),
        _event(datetime(2024, 3, 7, tzinfo=UTC), ticker="ZZZ", rsvps=[(ME, RsvpStatus.PENDING)]),
    ]
    grid = build_calendar_grid(events, [], user_id=ME, date_range=DateRange(date(2024, 3, 1), date(2024, 3, 31)))
    assert grid.statistics.total_events == 3
    assert grid.statistics.user_rsvps == 2
    assert grid.statistics.events_by_type == {"EARNINGS_CALL": 2, "ROADSHOW": 1}


def test_week_starts_on_monday():
    assert week_range(date(2024, 3, 13)) == DateRange(date(2024, 3, 11), date(2024, 3, 17))
    # Sunday belongs to the week that started six days earlier.
    assert week_range(date(2024, 3, 17)) == DateRange(date(2024, 3, 11), date(2024, 3, 17))
    assert week_range(date(2024, 3, 11)).start == date(2024, 3, 11)


def test_week_grid_keeps_only_events_with_own_rsvp():
    mine = _event(datetime(2024, 3, 12, 9, tzinfo=UTC), rsvps=[(ME, RsvpStatus.ACCEPTED)])
    theirs = _event(datetime(2024, 3, 12, 10, tzinfo=UTC), rsvps=[(OTHER, RsvpStatus.ACCEPTED)])
    outside = _event(datetime(2024, 3, 18, 9, tzinfo=UTC), rsvps=[(ME, RsvpStatus.ACCEPTED)])

    week = build_week_grid([mine, theirs, outside], user_id=ME, anchor=date(2024, 3, 13))

    assert [d.day_name for d in week.days] == [
        "Monday",
        "Tuesday",
        "Wednesday",
        "Thursday",
        "Friday",
        "Saturday",
        "Sunday",
    ]
    assert week.days[0].date == date(2024, 3, 11)
    assert [len(d.events) for d in week.days] == [0, 1, 0, 0, 0, 0, 0]
    assert week.days[1].events[0].user_rsvp.status == RsvpStatus.ACCEPTED
