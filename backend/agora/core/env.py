"""Dependency-free `.env` loading for local runs, scripts and Alembic."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, MutableMapping, Optional


ENV_FILE_ENV = "AGORA_ENV_FILE"

# backend/agora/core/env.py -> backend/agora/core -> backend/agora -> backend -> repo root
REPO_ROOT = Path(__file__).resolve().parents[3]


def parse_env_line(line: str) -> Optional[tuple[str, str]]:
    """Parse one `KEY=value` line; comments, blanks and junk yield None."""
    line = line.strip()
    if not line or line.startswith("#"):
        return None
    if line.startswith("export "):
        line = line[len("export "):].lstrip()
    key, sep, value = line.partition("=")
    key = key.strip()
    if not sep or not key:
        return None
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return key, value[1:-1]
    # Unquoted values may carry a trailing ` # comment`.
    hash_at = value.find(" #")
    if hash_at != -1:
        value = value[:hash_at].rstrip()
    return key, value


def env_file_candidates(environ: Optional[MutableMapping[str, str]] = None) -> list[Path]:
    environ = os.environ if environ is None else environ
    explicit = environ.get(ENV_FILE_ENV)
    if explicit:
        return [Path(explicit)]
    return [REPO_ROOT / ".env", REPO_ROOT / "backend" / ".env"]


def load_env_files(
    paths: Iterable[Path],
    *,
    environ: Optional[MutableMapping[str, str]] = None,
    override: bool = False,
) -> list[Path]:
    environ = os.environ if environ is None else environ
    loaded: list[Path] = []
    for p in paths:
        if not p.is_file():
            continue
        try:
            content = p.read_text(encoding="utf-8")
        except OSError:
            continue
        loaded.append(p)
        for raw in content.splitlines():
            parsed = parse_env_line(raw)
            if parsed is None:
                continue
            k, v = parsed
            if not override and k in environ:
                continue
            environ[k] = v
    return loaded


def load_env_if_present(*, override: bool = False) -> list[Path]:
    """Load `.env` files into the process environment if present.

    `AGORA_ENV_FILE` names a single file to use instead of the defaults
    (repo root `.env`, then `backend/.env`). Existing variables win unless
    `override=True`. Returns the files that were read.
    """
    return load_env_files(env_file_candidates(), override=override)
