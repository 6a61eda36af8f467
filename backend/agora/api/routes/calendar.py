"""Calendar grid and "my week" endpoints."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from agora.api.deps import get_db_session
from agora.models.event import EventType
from agora.schemas.calendar import CalendarGridResponse, WeekGridResponse
from agora.security.auth import Principal, get_current_principal
from agora.services.calendar_aggregator import CalendarAggregator
from agora.services.calendar_grid import CalendarFilter, as_utc
from agora.services.event_service import INVALID_TYPE
from agora.services.validation import coerce_optional_enum


router = APIRouter()


def _split_tickers(raw: Optional[str]) -> tuple[str, ...]:
    if not raw:
        return ()
    return tuple(t.strip() for t in raw.split(",") if t.strip())


def _utc_day(value: Optional[datetime]) -> Optional[date]:
    # Plain `YYYY-MM-DD` parses as midnight; timestamps keep their UTC date.
    return as_utc(value).date() if value is not None else None


@router.get("", response_model=CalendarGridResponse)
async def get_calendar(
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    gics_sector: Optional[str] = Query(None, alias="gicsSector"),
    event_type: Optional[str] = Query(None, alias="eventType"),
    followed_companies: Optional[str] = Query(None, alias="followedCompanies"),
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db_session),
) -> CalendarGridResponse:
    """Company x date grid for the requested range (default: current month, UTC)."""
    filters = CalendarFilter(
        gics_sector=gics_sector or None,
        event_type=coerce_optional_enum(EventType, event_type, INVALID_TYPE),
        tickers=_split_tickers(followed_companies),
    )
    view = await CalendarAggregator(db).month(
        principal.user_id, start=_utc_day(start_date), end=_utc_day(end_date), filters=filters
    )
    return CalendarGridResponse.build(view.grid, view.active_subscriptions)


@router.get("/week", response_model=WeekGridResponse)
async def get_week(
    anchor: Optional[datetime] = Query(None, alias="date"),
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db_session),
) -> WeekGridResponse:
    week = await CalendarAggregator(db).week(principal.user_id, anchor=_utc_day(anchor))
    return WeekGridResponse.build(week)
