from __future__ import annotations

import enum
import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, Enum, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from agora.core.base import Base, CreatedAtMixin, UpdatedAtMixin

if TYPE_CHECKING:
    from agora.models.company import UserCompany


class UserRole(str, enum.Enum):
    IR_ADMIN = "IR_ADMIN"
    ANALYST_MANAGER = "ANALYST_MANAGER"
    INVESTMENT_ANALYST = "INVESTMENT_ANALYST"


class User(Base, CreatedAtMixin, UpdatedAtMixin):
    __tablename__ = "users"

    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    username: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[UserRole] = mapped_column(Enum(UserRole, name="user_role_enum"), nullable=False)

    # Self-reference; acyclicity is not enforced.
    manager_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("users.user_id", ondelete="SET NULL"), nullable=True
    )
    company_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("user_companies.company_id", ondelete="SET NULL"), nullable=True
    )

    start: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    end: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    company: Mapped[Optional["UserCompany"]] = relationship("UserCompany", lazy="joined")
    manager: Mapped[Optional["User"]] = relationship("User", remote_side="User.user_id", lazy="select")

    def __repr__(self) -> str:
        return f"<User(user_id={self.user_id}, username={self.username}, role={self.role.value})>"
