"""Liveness and store probe (unauthenticated)."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from agora.api.deps import get_db_session
from agora.core.base import utcnow
from agora.repositories.company_repo import CompanyRepository
from agora.repositories.event_repo import EventRepository
from agora.repositories.user_repo import UserRepository


router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "OK", "message": "Agora API is running!", "timestamp": utcnow().isoformat()}


@router.get("/test-db")
async def test_db(db: Session = Depends(get_db_session)) -> dict[str, object]:
    counts = {
        "users": await UserRepository(db).count(),
        "events": await EventRepository(db).count(),
        "companies": await CompanyRepository(db).count(),
    }
    return {"message": "Database connection successful", "counts": counts}
