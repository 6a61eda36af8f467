"""Event management for IR admins, plus the shared read paths."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from agora.core.errors import InvalidArgument, NotFound
from agora.models.event import Event, EventType
from agora.repositories.event_repo import EventFilter, EventRepository
from agora.services.calendar_grid import as_utc
from agora.services.validation import blank, clean, coerce_enum


logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 200

INVALID_TYPE = "Invalid event type"
END_BEFORE_START = "End date must be after start date"

_TEXT_FIELDS = ("event_name", "ticker_symbol", "gics_sector", "gics_sub_sector", "location", "host_company", "description")


@dataclass(slots=True)
class EventPage:
    events: Sequence[Event]
    total: int
    limit: int
    offset: int

    @property
    def has_more(self) -> bool:
        return self.offset + len(self.events) < self.total


def _check_dates(start: Optional[datetime], end: Optional[datetime]) -> None:
    if start is not None and end is not None and as_utc(end) <= as_utc(start):
        raise InvalidArgument(END_BEFORE_START)


def _normalise(values: dict[str, Any]) -> dict[str, Any]:
    out = dict(values)
    for key in _TEXT_FIELDS:
        if key in out and isinstance(out[key], str):
            out[key] = clean(out[key])
    if "event_type" in out:
        out["event_type"] = coerce_enum(EventType, out["event_type"], INVALID_TYPE)
    return out


class EventService:
    def __init__(self, session: Session) -> None:
        self._events = EventRepository(session)

    async def page(self, spec: EventFilter, *, limit: int = DEFAULT_PAGE_SIZE, offset: int = 0) -> EventPage:
        if not 1 <= limit <= MAX_PAGE_SIZE:
            raise InvalidArgument(f"limit must be between 1 and {MAX_PAGE_SIZE}")
        if offset < 0:
            raise InvalidArgument("offset must be >= 0")
        events = await self._events.search(spec, limit=limit, offset=offset)
        total = await self._events.count(spec)
        return EventPage(events=events, total=total, limit=limit, offset=offset)

    async def get(self, event_id: uuid.UUID) -> Event:
        event = await self._events.get(event_id)
        if event is None:
            raise NotFound("Event not found")
        return event

    async def create(self, values: dict[str, Any]) -> Event:
        if blank(values.get("event_name")) or blank(values.get("event_type")) or values.get("start_date") is None:
            raise InvalidArgument("Event name, type, and start date are required")
        fields = _normalise(values)
        _check_dates(fields["start_date"], fields.get("end_date"))

        try:
            event = await self._events.create(Event(**fields))
        except IntegrityError as e:
            # Unknown ticker symbol or company id.
            raise InvalidArgument("Referenced company does not exist") from e
        logger.info("Event created", extra={"event_id": str(event.event_id), "event_type": event.event_type.value})
        return event

    async def update(self, event_id: uuid.UUID, changes: dict[str, Any]) -> Event:
        """Partial update; `changes` holds only the fields the caller sent."""
        event = await self.get(event_id)
        if "event_name" in changes and blank(changes["event_name"]):
            raise InvalidArgument("Event name cannot be empty")
        if "start_date" in changes and changes["start_date"] is None:
            raise InvalidArgument("Start date cannot be empty")
        if "event_type" in changes and changes["event_type"] is None:
            raise InvalidArgument(INVALID_TYPE)

        fields = _normalise(changes)
        _check_dates(
            fields.get("start_date", event.start_date),
            fields["end_date"] if "end_date" in fields else event.end_date,
        )
        if not fields:
            return event
        try:
            return await self._events.apply_changes(event, fields)
        except IntegrityError as e:
            raise InvalidArgument("Referenced company does not exist") from e

    async def delete(self, event_id: uuid.UUID) -> None:
        if not await self._events.delete(event_id):
            raise NotFound("Event not found")
        logger.info("Event deleted", extra={"event_id": str(event_id)})
