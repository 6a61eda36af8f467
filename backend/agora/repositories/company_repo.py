"""Company reference catalog repository (read-mostly)."""

from __future__ import annotations

import uuid
from typing import Sequence

from sqlalchemy import func, select

from agora.models.company import GicsCompany, UserCompany
from agora.repositories.base import BaseRepository


class CompanyRepository(BaseRepository[GicsCompany]):
    async def list_gics_companies(self) -> Sequence[GicsCompany]:
        stmt = select(GicsCompany).order_by(GicsCompany.company_name.asc(), GicsCompany.ticker_symbol.asc())
        return (await self._execute(stmt)).scalars().all()

    async def list_sector_pairs(self) -> list[tuple[str, str]]:
        stmt = (
            select(GicsCompany.gics_sector, GicsCompany.gics_sub_category)
            .distinct()
            .order_by(GicsCompany.gics_sector.asc(), GicsCompany.gics_sub_category.asc())
        )
        return [(row[0], row[1]) for row in (await self._execute(stmt)).all()]

    async def user_company_exists(self, company_id: uuid.UUID) -> bool:
        stmt = select(UserCompany.company_id).where(UserCompany.company_id == company_id)
        return (await self._execute(stmt)).first() is not None

    async def upsert_gics_company(
        self, *, ticker_symbol: str, company_name: str, gics_sector: str, gics_sub_category: str
    ) -> GicsCompany:
        existing = (
            await self._execute(select(GicsCompany).where(GicsCompany.ticker_symbol == ticker_symbol))
        ).scalars().first()
        if existing is None:
            existing = GicsCompany(ticker_symbol=ticker_symbol)
            self._session.add(existing)
        existing.company_name = company_name
        existing.gics_sector = gics_sector
        existing.gics_sub_category = gics_sub_category
        await self._commit()
        return existing

    async def count(self) -> int:
        return int((await self._execute(select(func.count()).select_from(GicsCompany))).scalar_one())
