"""Subscription repository."""

from __future__ import annotations

import uuid
from typing import Any, Optional, Sequence

from sqlalchemy import delete, select

from agora.models.subscription import Subscription, SubscriptionStatus
from agora.repositories.base import BaseRepository


class SubscriptionRepository(BaseRepository[Subscription]):
    async def get(self, sub_id: uuid.UUID) -> Optional[Subscription]:
        stmt = select(Subscription).where(Subscription.sub_id == sub_id)
        return (await self._execute(stmt)).scalars().first()

    async def list_for_user(
        self, user_id: uuid.UUID, status: Optional[SubscriptionStatus] = None
    ) -> Sequence[Subscription]:
        stmt = select(Subscription).where(Subscription.user_id == user_id)
        if status is not None:
            stmt = stmt.where(Subscription.status == status)
        stmt = stmt.order_by(Subscription.created_at.desc())
        return (await self._execute(stmt)).scalars().all()

    async def insert(self, subscription: Subscription) -> Subscription:
        """Insert; raises IntegrityError when an ACTIVE duplicate already exists."""
        return await self._add(subscription)

    async def apply_changes(self, subscription: Subscription, changes: dict[str, Any]) -> Subscription:
        for key, value in changes.items():
            setattr(subscription, key, value)
        await self._commit()
        self._session.refresh(subscription)
        return subscription

    async def delete(self, sub_id: uuid.UUID) -> int:
        result = await self._execute(delete(Subscription).where(Subscription.sub_id == sub_id))
        await self._commit()
        return int(result.rowcount or 0)
