"""Company reference catalogs.

- `UserCompany`: the firm a platform user works for.
- `GicsCompany`: public companies classified by GICS sector / sub-category;
  the calendar grid's row axis.
"""

from __future__ import annotations

import uuid
from typing import Optional

from sqlalchemy import Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from agora.core.base import Base, CreatedAtMixin, UpdatedAtMixin


class UserCompany(Base, CreatedAtMixin, UpdatedAtMixin):
    __tablename__ = "user_companies"

    company_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    company_name: Mapped[str] = mapped_column(String(255), nullable=False)
    location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)


class GicsCompany(Base, CreatedAtMixin, UpdatedAtMixin):
    __tablename__ = "gics_companies"

    company_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    ticker_symbol: Mapped[str] = mapped_column(String(16), nullable=False, unique=True)
    company_name: Mapped[str] = mapped_column(String(255), nullable=False)
    gics_sector: Mapped[str] = mapped_column(String(128), nullable=False)
    gics_sub_category: Mapped[str] = mapped_column(String(128), nullable=False)

    __table_args__ = (
        Index("ix_gics_companies_company_name", "company_name"),
        Index("ix_gics_companies_sector", "gics_sector", "gics_sub_category"),
    )

    def __repr__(self) -> str:
        return f"<GicsCompany(ticker={self.ticker_symbol}, name={self.company_name})>"
