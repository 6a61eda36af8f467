"""User repository."""

from __future__ import annotations

import uuid
from typing import Optional

from sqlalchemy import func, or_, select

from agora.models.user import User
from agora.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    async def get(self, user_id: uuid.UUID) -> Optional[User]:
        stmt = select(User).where(User.user_id == user_id)
        return (await self._execute(stmt)).scalars().first()

    async def exists(self, user_id: uuid.UUID) -> bool:
        stmt = select(User.user_id).where(User.user_id == user_id)
        return (await self._execute(stmt)).first() is not None

    async def find_by_login(self, identifier: str) -> Optional[User]:
        """Look a user up by username or email."""
        stmt = select(User).where(or_(User.username == identifier, User.email == identifier.lower())).limit(1)
        return (await self._execute(stmt)).scalars().first()

    async def username_or_email_taken(self, username: str, email: str) -> bool:
        stmt = select(User.user_id).where(or_(User.username == username, User.email == email)).limit(1)
        return (await self._execute(stmt)).first() is not None

    async def create(self, user: User) -> User:
        return await self._add(user)

    async def count(self) -> int:
        return int((await self._execute(select(func.count()).select_from(User))).scalar_one())
