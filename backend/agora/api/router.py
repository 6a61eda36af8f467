"""API root router, mounted under /api."""

from __future__ import annotations

from fastapi import APIRouter

from agora.api.routes.auth import router as auth_router
from agora.api.routes.calendar import router as calendar_router
from agora.api.routes.events import router as events_router
from agora.api.routes.health import router as health_router
from agora.api.routes.rsvp import router as rsvp_router
from agora.api.routes.subscriptions import router as subscriptions_router


router = APIRouter()
router.include_router(health_router)
router.include_router(auth_router, prefix="/auth", tags=["auth"])
router.include_router(events_router, prefix="/events", tags=["events"])
router.include_router(calendar_router, prefix="/calendar", tags=["calendar"])
router.include_router(rsvp_router, prefix="/rsvp", tags=["rsvp"])
router.include_router(subscriptions_router, prefix="/subscriptions", tags=["subscriptions"])
