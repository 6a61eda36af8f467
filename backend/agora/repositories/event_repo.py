"""Event repository.

Filtering is expressed as an `EventFilter` value and turned into predicates
by one function, shared by the page query and the count query so the two
can never disagree.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, Sequence

from sqlalchemy import ColumnElement, delete, func, select

from agora.models.event import Event, EventType
from agora.models.rsvp import Rsvp
from agora.repositories.base import BaseRepository


@dataclass(frozen=True, slots=True)
class EventFilter:
    gics_sector: Optional[str] = None
    event_type: Optional[EventType] = None
    ticker_symbol: Optional[str] = None
    tickers: tuple[str, ...] = ()
    starts_from: Optional[datetime] = None
    starts_until: Optional[datetime] = None
    rsvp_user_id: Optional[uuid.UUID] = None


def event_predicates(spec: EventFilter) -> list[ColumnElement[bool]]:
    conditions: list[ColumnElement[bool]] = []
    if spec.gics_sector:
        conditions.append(Event.gics_sector == spec.gics_sector)
    if spec.event_type is not None:
        conditions.append(Event.event_type == spec.event_type)
    if spec.ticker_symbol:
        conditions.append(Event.ticker_symbol == spec.ticker_symbol)
    if spec.tickers:
        conditions.append(Event.ticker_symbol.in_(spec.tickers))
    if spec.starts_from is not None:
        conditions.append(Event.start_date >= spec.starts_from)
    if spec.starts_until is not None:
        conditions.append(Event.start_date <= spec.starts_until)
    if spec.rsvp_user_id is not None:
        conditions.append(Event.rsvps.any(Rsvp.user_id == spec.rsvp_user_id))
    return conditions


class EventRepository(BaseRepository[Event]):
    async def get(self, event_id: uuid.UUID) -> Optional[Event]:
        stmt = select(Event).where(Event.event_id == event_id)
        return (await self._execute(stmt)).unique().scalars().first()

    async def exists(self, event_id: uuid.UUID) -> bool:
        stmt = select(Event.event_id).where(Event.event_id == event_id)
        return (await self._execute(stmt)).first() is not None

    async def search(
        self, spec: EventFilter, *, limit: Optional[int] = None, offset: int = 0
    ) -> Sequence[Event]:
        stmt = (
            select(Event)
            .where(*event_predicates(spec))
            .order_by(Event.start_date.asc(), Event.event_id.asc())
            .offset(offset)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        return (await self._execute(stmt)).unique().scalars().all()

    async def count(self, spec: Optional[EventFilter] = None) -> int:
        stmt = select(func.count()).select_from(Event)
        if spec is not None:
            stmt = stmt.where(*event_predicates(spec))
        return int((await self._execute(stmt)).scalar_one())

    async def create(self, event: Event) -> Event:
        return await self._add(event)

    async def apply_changes(self, event: Event, changes: dict[str, Any]) -> Event:
        for key, value in changes.items():
            setattr(event, key, value)
        await self._commit()
        self._session.refresh(event)
        return event

    async def delete(self, event_id: uuid.UUID) -> int:
        """Delete an event and its RSVPs; returns the number of events removed."""
        await self._execute(delete(Rsvp).where(Rsvp.event_id == event_id))
        result = await self._execute(delete(Event).where(Event.event_id == event_id))
        await self._commit()
        return int(result.rowcount or 0)
