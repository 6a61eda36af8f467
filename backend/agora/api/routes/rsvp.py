"""RSVP endpoints."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from agora.api.deps import get_db_session, parse_uuid
from agora.schemas.base import MessageResponse
from agora.schemas.event import RsvpMutationResponse, RsvpWithEvent
from agora.schemas.rsvp import EventRsvpsResponse, RsvpStatistics, RsvpUpsertRequest, RsvpWithUser
from agora.security.auth import Principal, get_current_principal
from agora.services.rsvp_reconciler import RsvpReconciler


router = APIRouter()


@router.post("", response_model=RsvpMutationResponse)
async def upsert_rsvp(
    payload: RsvpUpsertRequest,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db_session),
) -> RsvpMutationResponse:
    """Create or update the caller's RSVP for an event (one per user and event)."""
    outcome = await RsvpReconciler(db).upsert(principal.user_id, payload.event_id, payload.status)
    return RsvpMutationResponse(
        message=outcome.message,
        created=outcome.created,
        rsvp=RsvpWithEvent.model_validate(outcome.rsvp),
    )


@router.get("/user/{user_id}", response_model=list[RsvpWithEvent])
async def list_user_rsvps(
    user_id: str,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db_session),
) -> list[RsvpWithEvent]:
    rsvps = await RsvpReconciler(db).list_for_user(principal, parse_uuid(user_id, "user ID"))
    return [RsvpWithEvent.model_validate(r) for r in rsvps]


@router.get("/event/{event_id}", response_model=EventRsvpsResponse, dependencies=[Depends(get_current_principal)])
async def list_event_rsvps(
    event_id: str,
    status: Optional[str] = Query(None),
    db: Session = Depends(get_db_session),
) -> EventRsvpsResponse:
    summary = await RsvpReconciler(db).summarize_event(parse_uuid(event_id, "event ID"), status)
    return EventRsvpsResponse(
        rsvps=[RsvpWithUser.model_validate(r) for r in summary.rsvps],
        rsvps_by_status={
            key: [RsvpWithUser.model_validate(r) for r in group] for key, group in summary.by_status.items()
        },
        statistics=RsvpStatistics(**summary.statistics),
    )


@router.delete("/{event_id}", response_model=MessageResponse)
async def delete_rsvp(
    event_id: str,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db_session),
) -> MessageResponse:
    await RsvpReconciler(db).delete(principal.user_id, parse_uuid(event_id, "event ID"))
    return MessageResponse(message="RSVP deleted successfully")
