from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from pydantic import Field

from agora.models.event import EventType
from agora.schemas.base import ApiModel
from agora.schemas.company import GicsCompanyRead, UserCompanyRead
from agora.schemas.rsvp import RsvpWithUser


class EventCreate(ApiModel):
    event_name: Optional[str] = None
    event_type: Optional[str] = None
    ticker_symbol: Optional[str] = None
    gics_sector: Optional[str] = None
    gics_sub_sector: Optional[str] = None
    location: Optional[str] = None
    host_company: Optional[str] = None
    company_id: Optional[uuid.UUID] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    description: Optional[str] = None


class EventUpdate(EventCreate):
    """Partial update; only fields present in the request body are applied."""


class EventRead(ApiModel):
    event_id: uuid.UUID
    event_name: str
    event_type: EventType
    ticker_symbol: Optional[str] = None
    gics_sector: Optional[str] = None
    gics_sub_sector: Optional[str] = None
    location: Optional[str] = None
    host_company: Optional[str] = None
    company_id: Optional[uuid.UUID] = None
    start_date: datetime
    end_date: Optional[datetime] = None
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    gics_company: Optional[GicsCompanyRead] = None
    user_company: Optional[UserCompanyRead] = None


class EventDetail(EventRead):
    rsvps: list[RsvpWithUser] = Field(default_factory=list)


class EventMutationResponse(ApiModel):
    message: str
    event: EventRead


class Pagination(ApiModel):
    total: int
    limit: int
    offset: int
    has_more: bool


class EventListResponse(ApiModel):
    events: list[EventDetail]
    pagination: Pagination


class RsvpWithEvent(RsvpWithUser):
    event: Optional[EventRead] = None


class RsvpMutationResponse(ApiModel):
    message: str
    created: bool
    rsvp: RsvpWithEvent
