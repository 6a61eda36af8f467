"""Repository base.

Repositories are the only layer permitted to query the database. Every
statement goes through `_execute` / `_commit`, which normalise failures:

- unique / foreign-key violations (`IntegrityError`) are re-raised after a
  rollback so callers can turn them into Conflict or overwrite decisions;
- any other store failure is logged and surfaced as `StoreError`.
"""

from __future__ import annotations

import logging
from typing import Any, Generic, Optional, TypeVar

from sqlalchemy.engine import Result
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.sql import Executable

from agora.core.errors import StoreError


logger = logging.getLogger(__name__)

T = TypeVar("T")


class BaseRepository(Generic[T]):
    """Base repository providing guarded execute/commit helpers."""

    def __init__(self, session: Session) -> None:
        self._session: Session = session

    async def _execute(self, stmt: Executable, *, params: Optional[dict[str, Any]] = None) -> Result[Any]:
        try:
            return self._session.execute(stmt, params or {})
        except IntegrityError:
            self._session.rollback()
            raise
        except SQLAlchemyError as e:
            self._session.rollback()
            logger.exception("Store statement failed")
            raise StoreError("Database error") from e

    async def _commit(self) -> None:
        try:
            self._session.commit()
        except IntegrityError:
            self._session.rollback()
            raise
        except SQLAlchemyError as e:
            self._session.rollback()
            logger.exception("Store commit failed")
            raise StoreError("Database error") from e

    async def _add(self, obj: T) -> T:
        self._session.add(obj)
        await self._commit()
        self._session.refresh(obj)
        return obj
