"""Subscription lifecycle with ACTIVE-tuple deduplication.

Duplicates are rejected by the store (`uq_subscriptions_active_tuple`), so
creating or re-activating a subscription is a single conditional write and
concurrent identical requests cannot both succeed.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Any, Optional, Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from agora.core.base import utcnow
from agora.core.errors import Conflict, Forbidden, InvalidArgument, NotFound
from agora.models.subscription import Subscription, SubscriptionStatus
from agora.repositories.company_repo import CompanyRepository
from agora.repositories.subscription_repo import SubscriptionRepository
from agora.repositories.user_repo import UserRepository
from agora.security.auth import Principal
from agora.services.calendar_grid import as_utc
from agora.services.validation import blank, clean, coerce_enum, coerce_optional_enum


logger = logging.getLogger(__name__)

DUPLICATE_MESSAGE = "Similar active subscription already exists"
INVALID_STATUS = "Invalid subscription status"
END_BEFORE_START = "Subscription end must not precede its start"


class SubscriptionDeduplicator:
    def __init__(self, session: Session) -> None:
        self._subs = SubscriptionRepository(session)
        self._companies = CompanyRepository(session)
        self._users = UserRepository(session)

    async def create(
        self,
        user_id: uuid.UUID,
        gics_sector: Optional[str],
        gics_sub_category: Optional[str] = None,
        sub_end: Optional[datetime] = None,
    ) -> Subscription:
        if blank(gics_sector):
            raise InvalidArgument("GICS sector is required")

        start = utcnow()
        if sub_end is not None and as_utc(sub_end) < start:
            raise InvalidArgument(END_BEFORE_START)
        if not await self._users.exists(user_id):
            raise NotFound("User not found")

        subscription = Subscription(
            user_id=user_id,
            gics_sector=clean(gics_sector),
            gics_sub_category=clean(gics_sub_category),
            status=SubscriptionStatus.ACTIVE,
            sub_start=start,
            sub_end=sub_end,
        )
        try:
            created = await self._subs.insert(subscription)
        except IntegrityError as e:
            logger.info(
                "Duplicate active subscription rejected",
                extra={"user_id": str(user_id), "gics_sector": gics_sector},
            )
            raise Conflict(DUPLICATE_MESSAGE) from e
        return created

    async def list_for_user(self, user_id: uuid.UUID, status: Optional[str] = None) -> Sequence[Subscription]:
        return await self._subs.list_for_user(user_id, coerce_optional_enum(SubscriptionStatus, status, INVALID_STATUS))

    async def list_active(self, user_id: uuid.UUID) -> Sequence[Subscription]:
        return await self._subs.list_for_user(user_id, SubscriptionStatus.ACTIVE)

    async def get_owned(self, principal: Principal, sub_id: uuid.UUID) -> Subscription:
        subscription = await self._subs.get(sub_id)
        if subscription is None:
            raise NotFound("Subscription not found")
        if subscription.user_id != principal.user_id:
            raise Forbidden("Insufficient permissions")
        return subscription

    async def update(self, principal: Principal, sub_id: uuid.UUID, changes: dict[str, Any]) -> Subscription:
        """Apply a partial update. `changes` holds only the fields the caller sent."""
        subscription = await self.get_owned(principal, sub_id)

        values: dict[str, Any] = {}
        if "status" in changes and changes["status"] is not None:
            values["status"] = coerce_enum(SubscriptionStatus, changes["status"], INVALID_STATUS)
        if "gics_sector" in changes:
            if blank(changes["gics_sector"]):
                raise InvalidArgument("GICS sector is required")
            values["gics_sector"] = clean(changes["gics_sector"])
        if "gics_sub_category" in changes:
            values["gics_sub_category"] = clean(changes["gics_sub_category"])
        if "sub_end" in changes:
            sub_end = changes["sub_end"]
            if sub_end is not None and as_utc(sub_end) < as_utc(subscription.sub_start):
                raise InvalidArgument(END_BEFORE_START)
            values["sub_end"] = sub_end

        if not values:
            return subscription
        try:
            return await self._subs.apply_changes(subscription, values)
        except IntegrityError as e:
            raise Conflict(DUPLICATE_MESSAGE) from e

    async def delete(self, principal: Principal, sub_id: uuid.UUID) -> None:
        await self.get_owned(principal, sub_id)
        if not await self._subs.delete(sub_id):
            raise NotFound("Subscription not found")

    async def sector_catalog(self) -> list[tuple[str, list[str]]]:
        """Distinct sector -> sub-categories, both sorted."""
        catalog: dict[str, list[str]] = {}
        for sector, sub_category in await self._companies.list_sector_pairs():
            subs = catalog.setdefault(sector, [])
            if sub_category not in subs:
                subs.append(sub_category)
        return list(catalog.items())
