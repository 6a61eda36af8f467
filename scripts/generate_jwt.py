"""Mint an Agora session token for an existing user (local testing).

Usage (PowerShell):
  $env:AGORA_JWT_SECRET="your-secret"
  python scripts/generate_jwt.py --role INVESTMENT_ANALYST --sub 3f0c...-uuid

Pass the output as `Authorization: Bearer <token>`.
"""

from __future__ import annotations

import argparse
import os
import sys
import uuid
from pathlib import Path


ROOT = Path(__file__).resolve().parents[1]
BACKEND_DIR = ROOT / "backend"
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from agora.core.config import JWT_SECRET_ENV  # noqa: E402
from agora.core.env import load_env_if_present  # noqa: E402
from agora.security.auth import create_session_token  # noqa: E402
from agora.security.roles import Role  # noqa: E402


def main() -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("--sub", required=True, type=uuid.UUID, help="user id (UUID)")
    ap.add_argument("--role", required=True, choices=[r.value for r in Role])
    ap.add_argument("--ttl-hours", type=int, default=24)
    args = ap.parse_args()

    load_env_if_present()
    secret = os.environ.get(JWT_SECRET_ENV)
    if not secret:
        raise SystemExit(f"Missing {JWT_SECRET_ENV} in environment.")

    token = create_session_token(user_id=args.sub, role=Role(args.role), secret=secret, ttl_hours=args.ttl_hours)
    print(token)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
