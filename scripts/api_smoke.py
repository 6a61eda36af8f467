"""Minimal API smoke against the configured database: health, auth, access logs.

Usage:
  python scripts/api_smoke.py

Creates a throwaway analyst account (random username) and logs in with it.
"""

from __future__ import annotations

import logging
import sys
import uuid
from pathlib import Path

from fastapi.testclient import TestClient


ROOT = Path(__file__).resolve().parents[1]
BACKEND_DIR = ROOT / "backend"
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from agora.main import create_app  # noqa: E402


class ListHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.messages: list[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.messages.append(record.getMessage())


def main() -> int:
    app = create_app()

    logger = logging.getLogger("agora")
    h = ListHandler()
    h_stream = logging.StreamHandler()
    h_stream.setLevel(logging.INFO)
    h_stream.setFormatter(logging.Formatter("%(levelname)s %(message)s"))
    logger.addHandler(h)
    logger.addHandler(h_stream)

    suffix = uuid.uuid4().hex[:8]
    c = TestClient(app, raise_server_exceptions=True)
    try:
        r = c.get("/api/health")
        print("health:", r.status_code, r.json().get("message"))

        r = c.post(
            "/api/auth/signup",
            json={
                "firstName": "Smoke",
                "lastName": "Test",
                "username": f"smoke_{suffix}",
                "email": f"smoke_{suffix}@example.com",
                "password": "smoke-password",
                "role": "INVESTMENT_ANALYST",
            },
        )
        print("signup:", r.status_code)

        r = c.post("/api/auth/login", json={"username": f"smoke_{suffix}", "password": "smoke-password"})
        print("login:", r.status_code)
        token = r.json().get("token", "")

        r = c.get("/api/calendar", headers={"Authorization": f"Bearer {token}"})
        print("calendar:", r.status_code, "x-request-id:", r.headers.get("x-request-id"))
    except Exception as ex:  # noqa: BLE001
        print("EXCEPTION:", type(ex).__name__, str(ex))

    logger.removeHandler(h)
    logger.removeHandler(h_stream)
    print("agora logs:", h.messages[-3:])
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
