from __future__ import annotations

import uuid
from typing import Optional

from agora.schemas.base import ApiModel


class GicsCompanyRead(ApiModel):
    company_id: uuid.UUID
    ticker_symbol: str
    company_name: str
    gics_sector: str
    gics_sub_category: str


class CalendarCompany(ApiModel):
    """Row header of the calendar grid."""

    ticker_symbol: str
    company_name: str
    gics_sector: str
    gics_sub_category: str


class UserCompanyRead(ApiModel):
    company_name: str
    location: Optional[str] = None


class SectorCatalogEntry(ApiModel):
    sector: str
    sub_categories: list[str]
