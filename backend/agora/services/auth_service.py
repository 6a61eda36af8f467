"""Signup, login and profile lookup."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from agora.core.config import Settings
from agora.core.errors import Conflict, InvalidArgument, NotFound, Unauthorized
from agora.models.user import User, UserRole
from agora.repositories.company_repo import CompanyRepository
from agora.repositories.user_repo import UserRepository
from agora.security.auth import create_session_token
from agora.security.passwords import get_password_hash, verify_password
from agora.services.validation import blank, coerce_enum


logger = logging.getLogger(__name__)

_REQUIRED_SIGNUP_FIELDS = ("first_name", "last_name", "username", "email", "password", "role")
DUPLICATE_USER = "User with this username or email already exists"


@dataclass(frozen=True, slots=True)
class IssuedSession:
    user: User
    token: str


class AuthService:
    def __init__(self, session: Session, settings: Settings) -> None:
        self._users = UserRepository(session)
        self._companies = CompanyRepository(session)
        self._settings = settings

    def _issue(self, user: User) -> str:
        return create_session_token(
            user_id=user.user_id,
            role=user.role,
            secret=self._settings.jwt_secret,
            ttl_hours=self._settings.token_ttl_hours,
        )

    async def signup(self, data: dict[str, Any]) -> IssuedSession:
        if any(blank(data.get(name)) for name in _REQUIRED_SIGNUP_FIELDS):
            raise InvalidArgument("All required fields must be provided")
        role = coerce_enum(UserRole, data["role"], "Invalid role")
        username = data["username"].strip()
        email = data["email"].strip().lower()

        if await self._users.username_or_email_taken(username, email):
            raise Conflict(DUPLICATE_USER)
        company_id = data.get("company_id")
        if company_id is not None and not await self._companies.user_company_exists(company_id):
            raise InvalidArgument("Referenced company does not exist")
        manager_id = data.get("manager_id")
        if manager_id is not None and not await self._users.exists(manager_id):
            raise InvalidArgument("Referenced manager does not exist")

        user = User(
            first_name=data["first_name"].strip(),
            last_name=data["last_name"].strip(),
            username=username,
            email=email,
            password_hash=get_password_hash(data["password"]),
            role=role,
            company_id=company_id,
            manager_id=manager_id,
        )
        try:
            user = await self._users.create(user)
        except IntegrityError as e:
            # Concurrent signup with the same username or email.
            raise Conflict(DUPLICATE_USER) from e

        logger.info("User signed up", extra={"user_id": str(user.user_id), "role": role.value})
        return IssuedSession(user=user, token=self._issue(user))

    async def login(self, identifier: Optional[str], password: Optional[str]) -> IssuedSession:
        if blank(identifier) or blank(password):
            raise InvalidArgument("Username and password are required")
        user = await self._users.find_by_login(identifier.strip())
        if user is None or not verify_password(password, user.password_hash):
            raise Unauthorized("Invalid credentials")
        return IssuedSession(user=user, token=self._issue(user))

    async def me(self, user_id: uuid.UUID) -> User:
        user = await self._users.get(user_id)
        if user is None:
            raise NotFound("User not found")
        return user
