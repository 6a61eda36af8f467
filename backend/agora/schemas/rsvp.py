from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from agora.models.rsvp import RsvpStatus
from agora.schemas.base import ApiModel
from agora.schemas.user import UserSummary


class RsvpUpsertRequest(ApiModel):
    event_id: Optional[uuid.UUID] = None
    status: Optional[str] = None


class RsvpRead(ApiModel):
    rsvp_id: uuid.UUID
    user_id: uuid.UUID
    event_id: uuid.UUID
    status: RsvpStatus
    created_at: datetime
    updated_at: datetime


class RsvpWithUser(RsvpRead):
    user: Optional[UserSummary] = None


class RsvpStatistics(ApiModel):
    total: int = 0
    accepted: int = 0
    declined: int = 0
    tentative: int = 0
    pending: int = 0


class EventRsvpsResponse(ApiModel):
    rsvps: list[RsvpWithUser]
    rsvps_by_status: dict[str, list[RsvpWithUser]]
    statistics: RsvpStatistics
