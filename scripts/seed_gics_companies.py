"""Load the GICS company catalog from a CSV file.

Usage:
  python scripts/seed_gics_companies.py companies.csv

Expected header: ticker_symbol,company_name,gics_sector,gics_sub_category
(camelCase headers such as tickerSymbol are accepted too). Existing tickers
are updated in place.
"""

from __future__ import annotations

import argparse
import asyncio
import csv
import sys
from pathlib import Path


ROOT = Path(__file__).resolve().parents[1]
BACKEND_DIR = ROOT / "backend"
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from agora.core.config import Settings  # noqa: E402
from agora.core.db import create_db_engine, create_session_factory  # noqa: E402
from agora.repositories.company_repo import CompanyRepository  # noqa: E402
from agora.schemas.base import to_wire_name  # noqa: E402


FIELDS = ("ticker_symbol", "company_name", "gics_sector", "gics_sub_category")


def read_rows(path: Path) -> list[dict[str, str]]:
    rows: list[dict[str, str]] = []
    with path.open(newline="", encoding="utf-8") as fh:
        for lineno, raw in enumerate(csv.DictReader(fh), start=2):
            row = {f: (raw.get(f) or raw.get(to_wire_name(f)) or "").strip() for f in FIELDS}
            missing = [f for f in FIELDS if not row[f]]
            if missing:
                raise SystemExit(f"{path}:{lineno}: missing {', '.join(missing)}")
            row["ticker_symbol"] = row["ticker_symbol"].upper()
            rows.append(row)
    return rows


async def seed(rows: list[dict[str, str]]) -> int:
    settings = Settings.from_env()
    session = create_session_factory(create_db_engine(settings))()
    try:
        repo = CompanyRepository(session)
        for row in rows:
            await repo.upsert_gics_company(**row)
        return await repo.count()
    finally:
        session.close()


def main() -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("csv_path", type=Path)
    args = ap.parse_args()

    rows = read_rows(args.csv_path)
    total = asyncio.run(seed(rows))
    print(f"Upserted {len(rows)} companies; catalog now holds {total}.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
