"""RSVP repository.

Single-row writes keyed by (user_id, event_id); the unique constraint
`uq_rsvps_user_event` guarantees at most one row per pair.
"""

from __future__ import annotations

import uuid
from typing import Optional, Sequence

from sqlalchemy import delete, select, update

from agora.core.base import utcnow
from agora.models.rsvp import Rsvp, RsvpStatus
from agora.repositories.base import BaseRepository


class RsvpRepository(BaseRepository[Rsvp]):
    async def get(self, user_id: uuid.UUID, event_id: uuid.UUID) -> Optional[Rsvp]:
        stmt = select(Rsvp).where(Rsvp.user_id == user_id, Rsvp.event_id == event_id)
        return (await self._execute(stmt)).scalars().first()

    async def update_status(self, user_id: uuid.UUID, event_id: uuid.UUID, status: RsvpStatus) -> int:
        """Overwrite the status in place; returns affected row count (0 or 1)."""
        stmt = (
            update(Rsvp)
            .where(Rsvp.user_id == user_id, Rsvp.event_id == event_id)
            .values(status=status, updated_at=utcnow())
            .execution_options(synchronize_session="fetch")
        )
        result = await self._execute(stmt)
        await self._commit()
        return int(result.rowcount or 0)

    async def insert(self, user_id: uuid.UUID, event_id: uuid.UUID, status: RsvpStatus) -> Rsvp:
        """Insert a new row; raises IntegrityError if the pair already exists."""
        return await self._add(Rsvp(user_id=user_id, event_id=event_id, status=status))

    async def delete(self, user_id: uuid.UUID, event_id: uuid.UUID) -> int:
        result = await self._execute(delete(Rsvp).where(Rsvp.user_id == user_id, Rsvp.event_id == event_id))
        await self._commit()
        return int(result.rowcount or 0)

    async def list_for_user(self, user_id: uuid.UUID) -> Sequence[Rsvp]:
        stmt = select(Rsvp).where(Rsvp.user_id == user_id).order_by(Rsvp.created_at.desc())
        return (await self._execute(stmt)).scalars().all()

    async def list_for_event(self, event_id: uuid.UUID, status: Optional[RsvpStatus] = None) -> Sequence[Rsvp]:
        stmt = select(Rsvp).where(Rsvp.event_id == event_id)
        if status is not None:
            stmt = stmt.where(Rsvp.status == status)
        stmt = stmt.order_by(Rsvp.created_at.desc())
        return (await self._execute(stmt)).scalars().all()
