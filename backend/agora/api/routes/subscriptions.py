"""Sector subscription endpoints. Callers only ever see their own rows."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from agora.api.deps import get_db_session, parse_uuid
from agora.schemas.base import MessageResponse
from agora.schemas.company import SectorCatalogEntry
from agora.schemas.subscription import (
    SubscriptionCreate,
    SubscriptionMutationResponse,
    SubscriptionRead,
    SubscriptionUpdate,
)
from agora.security.auth import Principal, get_current_principal
from agora.services.subscription_deduplicator import SubscriptionDeduplicator


router = APIRouter()


@router.get("", response_model=list[SubscriptionRead])
async def list_subscriptions(
    status_filter: Optional[str] = Query(None, alias="status"),
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db_session),
) -> list[SubscriptionRead]:
    subs = await SubscriptionDeduplicator(db).list_for_user(principal.user_id, status_filter)
    return [SubscriptionRead.model_validate(s) for s in subs]


# Declared before "/{sub_id}" so "sectors" is not taken for an id.
@router.get("/sectors", response_model=list[SectorCatalogEntry], dependencies=[Depends(get_current_principal)])
async def list_sectors(
    db: Session = Depends(get_db_session),
) -> list[SectorCatalogEntry]:
    catalog = await SubscriptionDeduplicator(db).sector_catalog()
    return [SectorCatalogEntry(sector=sector, sub_categories=subs) for sector, subs in catalog]


@router.get("/{sub_id}", response_model=SubscriptionRead)
async def get_subscription(
    sub_id: str,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db_session),
) -> SubscriptionRead:
    sub = await SubscriptionDeduplicator(db).get_owned(principal, parse_uuid(sub_id, "subscription ID"))
    return SubscriptionRead.model_validate(sub)


@router.post("", response_model=SubscriptionMutationResponse, status_code=status.HTTP_201_CREATED)
async def create_subscription(
    payload: SubscriptionCreate,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db_session),
) -> SubscriptionMutationResponse:
    sub = await SubscriptionDeduplicator(db).create(
        principal.user_id, payload.gics_sector, payload.gics_sub_category, payload.sub_end
    )
    return SubscriptionMutationResponse(
        message="Subscription created successfully", subscription=SubscriptionRead.model_validate(sub)
    )


@router.put("/{sub_id}", response_model=SubscriptionMutationResponse)
async def update_subscription(
    sub_id: str,
    payload: SubscriptionUpdate,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db_session),
) -> SubscriptionMutationResponse:
    sub = await SubscriptionDeduplicator(db).update(
        principal, parse_uuid(sub_id, "subscription ID"), payload.model_dump(exclude_unset=True)
    )
    return SubscriptionMutationResponse(
        message="Subscription updated successfully", subscription=SubscriptionRead.model_validate(sub)
    )


@router.delete("/{sub_id}", response_model=MessageResponse)
async def delete_subscription(
    sub_id: str,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db_session),
) -> MessageResponse:
    await SubscriptionDeduplicator(db).delete(principal, parse_uuid(sub_id, "subscription ID"))
    return MessageResponse(message="Subscription deleted successfully")
