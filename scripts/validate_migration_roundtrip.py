"""Validate Alembic upgrade + downgrade roundtrip (PostgreSQL).

Usage:
  set DATABASE_URL=postgresql+psycopg://...
  python scripts/validate_migration_roundtrip.py

This script:
- upgrades to head
- verifies expected tables, enum types and uniqueness indexes exist
- downgrades to base
- verifies they are removed
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, text


ROOT = Path(__file__).resolve().parents[1]
BACKEND_DIR = ROOT / "backend"
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from agora.core.config import DATABASE_URL_ENV  # noqa: E402
from agora.core.env import load_env_if_present  # noqa: E402


EXPECTED_TABLES = ["users", "user_companies", "gics_companies", "events", "rsvps", "subscriptions"]

REQUIRED_ENUMS = ["user_role_enum", "event_type_enum", "rsvp_status_enum", "subscription_status_enum"]

# Store-side uniqueness the RSVP and subscription writes rely on.
REQUIRED_UNIQUE_INDEXES = ["uq_rsvps_user_event", "uq_subscriptions_active_tuple"]


def _alembic_config() -> Config:
    cfg = Config(str(BACKEND_DIR / "alembic.ini"))
    cfg.set_main_option("script_location", str(BACKEND_DIR / "alembic"))
    return cfg


def _db_url() -> str:
    load_env_if_present()
    url = os.environ.get(DATABASE_URL_ENV)
    if not url:
        print(f"Missing {DATABASE_URL_ENV}.")
        sys.exit(2)
    return url


def _names(engine, sql: str) -> set[str]:
    with engine.connect() as c:
        return {r[0] for r in c.execute(text(sql)).fetchall()}


def _tables(engine) -> set[str]:
    return _names(engine, "select tablename from pg_tables where schemaname = 'public'")


def _enums(engine) -> set[str]:
    return _names(
        engine,
        """
        select t.typname
        from pg_type t
        join pg_namespace n on n.oid = t.typnamespace
        where n.nspname = 'public' and t.typtype = 'e'
        """,
    )


def _unique_indexes(engine) -> set[str]:
    return _names(
        engine,
        """
        select c.relname
        from pg_index i
        join pg_class c on c.oid = i.indexrelid
        join pg_namespace n on n.oid = c.relnamespace
        where n.nspname = 'public' and i.indisunique
        """,
    )


def _check(label: str, expected: list[str], actual: set[str], *, present: bool) -> bool:
    wrong = [name for name in expected if (name in actual) != present]
    if wrong:
        state = "missing" if present else "leftover"
        print(f"FAIL: {state} {label}:", wrong)
        return False
    return True


def main() -> int:
    url = _db_url()
    cfg = _alembic_config()
    cfg.set_main_option("sqlalchemy.url", url)

    engine = create_engine(url, future=True)

    print("Upgrading to head…")
    command.upgrade(cfg, "head")
    if not (
        _check("tables after upgrade", EXPECTED_TABLES, _tables(engine), present=True)
        and _check("enums after upgrade", REQUIRED_ENUMS, _enums(engine), present=True)
        and _check("unique indexes after upgrade", REQUIRED_UNIQUE_INDEXES, _unique_indexes(engine), present=True)
    ):
        return 1

    print("Downgrading to base…")
    command.downgrade(cfg, "base")
    if not (
        _check("tables after downgrade", EXPECTED_TABLES, _tables(engine), present=False)
        and _check("enums after downgrade", REQUIRED_ENUMS, _enums(engine), present=False)
    ):
        return 1

    print("PASS: migration roundtrip clean.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
