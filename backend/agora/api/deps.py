"""API dependencies."""

from __future__ import annotations

import uuid
from collections.abc import Generator

from fastapi import Request
from sqlalchemy.orm import Session

from agora.core.config import Settings
from agora.core.errors import InvalidArgument


def get_db_session(request: Request) -> Generator[Session, None, None]:
    """Provide a database session for request scope."""
    session: Session = request.app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def parse_uuid(raw: str, label: str) -> uuid.UUID:
    try:
        return uuid.UUID(raw)
    except ValueError as e:
        raise InvalidArgument(f"Invalid {label}") from e
