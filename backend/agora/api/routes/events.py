"""Event endpoints. Reads for any session; writes for IR admins only."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from agora.api.deps import get_db_session, parse_uuid
from agora.models.event import EventType
from agora.repositories.event_repo import EventFilter
from agora.schemas.base import MessageResponse
from agora.schemas.event import (
    EventCreate,
    EventDetail,
    EventListResponse,
    EventMutationResponse,
    EventRead,
    EventUpdate,
    Pagination,
)
from agora.security.auth import get_current_principal, require_roles
from agora.security.roles import EVENT_ADMIN_ROLES
from agora.services.event_service import DEFAULT_PAGE_SIZE, INVALID_TYPE, EventService
from agora.services.validation import coerce_optional_enum


router = APIRouter(dependencies=[Depends(get_current_principal)])

admin_only = [Depends(require_roles(*EVENT_ADMIN_ROLES))]


@router.get("", response_model=EventListResponse)
async def list_events(
    gics_sector: Optional[str] = Query(None, alias="gicsSector"),
    event_type: Optional[str] = Query(None, alias="eventType"),
    ticker_symbol: Optional[str] = Query(None, alias="tickerSymbol"),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    limit: int = Query(DEFAULT_PAGE_SIZE),
    offset: int = Query(0),
    db: Session = Depends(get_db_session),
) -> EventListResponse:
    spec = EventFilter(
        gics_sector=gics_sector or None,
        event_type=coerce_optional_enum(EventType, event_type, INVALID_TYPE),
        ticker_symbol=ticker_symbol or None,
        starts_from=start_date,
        starts_until=end_date,
    )
    page = await EventService(db).page(spec, limit=limit, offset=offset)
    return EventListResponse(
        events=[EventDetail.model_validate(e) for e in page.events],
        pagination=Pagination(total=page.total, limit=page.limit, offset=page.offset, has_more=page.has_more),
    )


@router.get("/{event_id}", response_model=EventDetail)
async def get_event(event_id: str, db: Session = Depends(get_db_session)) -> EventDetail:
    event = await EventService(db).get(parse_uuid(event_id, "event ID"))
    return EventDetail.model_validate(event)


@router.post("", response_model=EventMutationResponse, status_code=status.HTTP_201_CREATED, dependencies=admin_only)
async def create_event(payload: EventCreate, db: Session = Depends(get_db_session)) -> EventMutationResponse:
    event = await EventService(db).create(payload.model_dump())
    return EventMutationResponse(message="Event created successfully", event=EventRead.model_validate(event))


@router.put("/{event_id}", response_model=EventMutationResponse, dependencies=admin_only)
async def update_event(
    event_id: str, payload: EventUpdate, db: Session = Depends(get_db_session)
) -> EventMutationResponse:
    event = await EventService(db).update(parse_uuid(event_id, "event ID"), payload.model_dump(exclude_unset=True))
    return EventMutationResponse(message="Event updated successfully", event=EventRead.model_validate(event))


@router.delete("/{event_id}", response_model=MessageResponse, dependencies=admin_only)
async def delete_event(event_id: str, db: Session = Depends(get_db_session)) -> MessageResponse:
    await EventService(db).delete(parse_uuid(event_id, "event ID"))
    return MessageResponse(message="Event deleted successfully")
