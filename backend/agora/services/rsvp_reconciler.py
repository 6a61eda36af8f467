"""RSVP reconciliation: create-vs-update with one row per (user, event).

The write is conditional rather than check-then-insert: the status is first
overwritten in place; only when no row matched is a new one inserted. If a
concurrent request inserts the same pair in between, the unique constraint
rejects our insert and the in-place overwrite is applied instead, so the pair
never ends up with two rows.
"""

from __future__ import annotations

import logging
import uuid
from collections import defaultdict
from dataclasses import dataclass
from typing import Optional, Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from agora.core.errors import Forbidden, InvalidArgument, NotFound, StoreError
from agora.models.rsvp import Rsvp, RsvpStatus
from agora.repositories.event_repo import EventRepository
from agora.repositories.rsvp_repo import RsvpRepository
from agora.repositories.user_repo import UserRepository
from agora.security.auth import Principal
from agora.security.roles import RSVP_OVERSIGHT_ROLES, is_role_allowed
from agora.services.validation import coerce_enum, coerce_optional_enum


logger = logging.getLogger(__name__)

INVALID_STATUS = "Invalid RSVP status"
USER_NOT_FOUND = "User not found"
EVENT_NOT_FOUND = "Event not found"


@dataclass(frozen=True, slots=True)
class RsvpOutcome:
    rsvp: Rsvp
    created: bool

    @property
    def message(self) -> str:
        return "RSVP created successfully" if self.created else "RSVP updated successfully"


@dataclass(slots=True)
class EventRsvpSummary:
    rsvps: list[Rsvp]
    by_status: dict[str, list[Rsvp]]
    statistics: dict[str, int]


class RsvpReconciler:
    def __init__(self, session: Session) -> None:
        self._events = EventRepository(session)
        self._rsvps = RsvpRepository(session)
        self._users = UserRepository(session)

    async def upsert(self, user_id: uuid.UUID, event_id: Optional[uuid.UUID], status: object) -> RsvpOutcome:
        if event_id is None or status is None or status == "":
            raise InvalidArgument("Event ID and status are required")
        new_status = coerce_enum(RsvpStatus, status, INVALID_STATUS)

        if not await self._users.exists(user_id):
            raise NotFound(USER_NOT_FOUND)
        if not await self._events.exists(event_id):
            raise NotFound(EVENT_NOT_FOUND)

        if await self._rsvps.update_status(user_id, event_id, new_status):
            return RsvpOutcome(rsvp=await self._load(user_id, event_id), created=False)

        try:
            rsvp = await self._rsvps.insert(user_id, event_id, new_status)
        except IntegrityError:
            # Lost an insert race for the same pair, or the user or event vanished.
            logger.info("RSVP insert collided; overwriting", extra={"user_id": str(user_id), "event_id": str(event_id)})
            if not await self._rsvps.update_status(user_id, event_id, new_status):
                raise NotFound(EVENT_NOT_FOUND if await self._users.exists(user_id) else USER_NOT_FOUND)
            return RsvpOutcome(rsvp=await self._load(user_id, event_id), created=False)

        logger.info("RSVP created", extra={"user_id": str(user_id), "event_id": str(event_id)})
        return RsvpOutcome(rsvp=rsvp, created=True)

    async def delete(self, user_id: uuid.UUID, event_id: uuid.UUID) -> None:
        if not await self._rsvps.delete(user_id, event_id):
            raise NotFound("RSVP not found")

    async def list_for_user(self, principal: Principal, user_id: uuid.UUID) -> Sequence[Rsvp]:
        if not principal.is_self(user_id) and not is_role_allowed(principal.role, RSVP_OVERSIGHT_ROLES):
            raise Forbidden("Insufficient permissions")
        return await self._rsvps.list_for_user(user_id)

    async def summarize_event(self, event_id: uuid.UUID, status: Optional[str] = None) -> EventRsvpSummary:
        status_filter = coerce_optional_enum(RsvpStatus, status, INVALID_STATUS)
        rsvps = list(await self._rsvps.list_for_event(event_id, status_filter))

        by_status: dict[str, list[Rsvp]] = defaultdict(list)
        for rsvp in rsvps:
            by_status[rsvp.status.value].append(rsvp)

        statistics = {"total": len(rsvps)}
        for s in RsvpStatus:
            statistics[s.value.lower()] = len(by_status.get(s.value, ()))
        return EventRsvpSummary(rsvps=rsvps, by_status=dict(by_status), statistics=statistics)

    async def _load(self, user_id: uuid.UUID, event_id: uuid.UUID) -> Rsvp:
        rsvp = await self._rsvps.get(user_id, event_id)
        if rsvp is None:
            # Removed between our write and the read-back.
            raise StoreError("RSVP could not be read back")
        return rsvp
