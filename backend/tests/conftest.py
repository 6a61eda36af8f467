from __future__ import annotations

import base64
import hashlib
import hmac
import json
import time
import uuid
from datetime import datetime, timezone
from typing import Generator, Optional

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

import agora.models  # noqa: F401
from agora.core.base import Base
from agora.core.config import Settings
from agora.main import create_app
from agora.models import Event, EventType, GicsCompany, Rsvp, RsvpStatus, User, UserCompany, UserRole
from agora.security.passwords import get_password_hash


UTC = timezone.utc
TEST_SECRET = "test-secret"
TEST_PASSWORD = "correct horse battery"


@pytest.fixture()
def engine() -> Generator[Engine, None, None]:
    """Fresh in-memory SQLite database per test (one shared connection)."""
    eng = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )

    @event.listens_for(eng, "connect")
    def _enable_foreign_keys(dbapi_connection, _record):  # noqa: ANN001
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture()
def settings() -> Settings:
    return Settings(database_url="sqlite+pysqlite:///:memory:", jwt_secret=TEST_SECRET)


@pytest.fixture()
def app(settings: Settings, engine: Engine) -> FastAPI:
    return create_app(settings, engine=engine)


@pytest.fixture()
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest.fixture()
def db_session(app: FastAPI) -> Generator[Session, None, None]:
    """Session on the same database the app uses. Writes must be committed."""
    session: Session = app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="session")
def password_hash() -> str:
    # bcrypt is deliberately slow; hash once per run.
    return get_password_hash(TEST_PASSWORD)


@pytest.fixture()
def make_user(db_session: Session, password_hash: str):
    def _make(
        role: UserRole = UserRole.INVESTMENT_ANALYST,
        *,
        username: Optional[str] = None,
        company: Optional[UserCompany] = None,
        manager: Optional[User] = None,
    ) -> User:
        name = username or f"user_{uuid.uuid4().hex[:8]}"
        user = User(
            first_name="Test",
            last_name=name.title(),
            username=name,
            email=f"{name}@example.com",
            password_hash=password_hash,
            role=role,
            company_id=company.company_id if company else None,
            manager_id=manager.user_id if manager else None,
        )
        db_session.add(user)
        db_session.commit()
        return user

    return _make


@pytest.fixture()
def make_company(db_session: Session):
    def _make(ticker: str, name: Optional[str] = None, sector: str = "Information Technology", sub: str = "Software") -> GicsCompany:
        company = GicsCompany(
            ticker_symbol=ticker,
            company_name=name or f"{ticker} Inc.",
            gics_sector=sector,
            gics_sub_category=sub,
        )
        db_session.add(company)
        db_session.commit()
        return company

    return _make


@pytest.fixture()
def make_event(db_session: Session):
    def _make(
        start: datetime,
        *,
        name: str = "Quarterly call",
        event_type: EventType = EventType.EARNINGS_CALL,
        ticker: Optional[str] = None,
        sector: Optional[str] = None,
        end: Optional[datetime] = None,
    ) -> Event:
        ev = Event(
            event_name=name,
            event_type=event_type,
            ticker_symbol=ticker,
            gics_sector=sector,
            start_date=start,
            end_date=end,
        )
        db_session.add(ev)
        db_session.commit()
        return ev

    return _make


@pytest.fixture()
def make_rsvp(db_session: Session):
    def _make(user: User, ev: Event, status: RsvpStatus = RsvpStatus.ACCEPTED) -> Rsvp:
        rsvp = Rsvp(user_id=user.user_id, event_id=ev.event_id, status=status)
        db_session.add(rsvp)
        db_session.commit()
        return rsvp

    return _make


def make_jwt(sub: str, role: str, secret: str = TEST_SECRET, *, exp: int | None = None) -> str:
    """HS256 JWT generator for API tests, independent of the app's codec."""

    def b64url(raw: bytes) -> str:
        return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")

    header = {"alg": "HS256", "typ": "JWT"}
    payload: dict[str, object] = {"sub": sub, "role": role, "iat": int(time.time())}
    if exp is not None:
        payload["exp"] = exp

    header_b64 = b64url(json.dumps(header, separators=(",", ":")).encode("utf-8"))
    payload_b64 = b64url(json.dumps(payload, separators=(",", ":")).encode("utf-8"))
    signing_input = f"{header_b64}.{payload_b64}".encode("ascii")
    sig = hmac.new(secret.encode("utf-8"), signing_input, hashlib.sha256).digest()
    return f"{header_b64}.{payload_b64}.{b64url(sig)}"


def auth_header(user: User, *, exp: int | None = None) -> dict[str, str]:
    token = make_jwt(
        sub=str(user.user_id),
        role=user.role.value,
        exp=exp if exp is not None else int(time.time()) + 3600,
    )
    return {"Authorization": f"Bearer {token}"}


def utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=UTC)
