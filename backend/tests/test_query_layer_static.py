from __future__ import annotations

import re
from pathlib import Path


ROOT = Path(__file__).resolve().parents[2]
PKG_DIR = ROOT / "backend" / "agora"

# Only repositories build and run statements.
QUERY_LAYERS = {"repositories", "models", "core"}

FORBIDDEN = [
    re.compile(r"from sqlalchemy import [^\n]*\b(select|insert|update|delete)\b"),
    re.compile(r"\.execute\("),
]


def test_statements_are_confined_to_repositories():
    files = [f for f in PKG_DIR.glob("**/*.py") if f.relative_to(PKG_DIR).parts[0] not in QUERY_LAYERS]
    assert files, "No package files found."

    offenders: list[str] = []
    for f in files:
        txt = f.read_text(encoding="utf-8", errors="ignore")
        for pattern in FORBIDDEN:
            if pattern.search(txt):
                offenders.append(f"{f.relative_to(ROOT)} matches {pattern.pattern!r}")

    assert not offenders, "Query-layer violations:\n" + "\n".join(offenders)
