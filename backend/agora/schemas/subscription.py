from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from agora.models.subscription import SubscriptionStatus
from agora.schemas.base import ApiModel
from agora.schemas.user import UserSummary


class SubscriptionCreate(ApiModel):
    gics_sector: Optional[str] = None
    gics_sub_category: Optional[str] = None
    sub_end: Optional[datetime] = None


class SubscriptionUpdate(ApiModel):
    gics_sector: Optional[str] = None
    gics_sub_category: Optional[str] = None
    sub_end: Optional[datetime] = None
    status: Optional[str] = None


class SubscriptionRead(ApiModel):
    sub_id: uuid.UUID
    user_id: uuid.UUID
    gics_sector: str
    gics_sub_category: Optional[str] = None
    status: SubscriptionStatus
    sub_start: datetime
    sub_end: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    user: Optional[UserSummary] = None


class SubscriptionMutationResponse(ApiModel):
    message: str
    subscription: SubscriptionRead
