"""Authentication & authorization (session tokens).

Design:
- Bearer JWT tokens (HS256) issued at signup/login, 24h lifetime by default.
- User id (`sub`) and role are embedded in token claims.
- Default deny. Endpoints must explicitly allow roles.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
import time
import uuid
from dataclasses import dataclass
from typing import Any, Callable

from fastapi import Depends, Request

from agora.core.config import Settings
from agora.core.errors import Forbidden, Unauthorized
from agora.security.roles import Role, is_role_allowed


_HEADER = {"alg": "HS256", "typ": "JWT"}


@dataclass(frozen=True, slots=True)
class Principal:
    """Authenticated principal extracted from token claims."""

    user_id: uuid.UUID
    role: Role

    def is_self(self, user_id: uuid.UUID) -> bool:
        return self.user_id == user_id


def _b64url_decode(data: str) -> bytes:
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _b64url_encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def _hmac_sha256(key: bytes, msg: bytes) -> bytes:
    return hmac.new(key, msg, hashlib.sha256).digest()


def _json_segment(obj: dict[str, Any]) -> str:
    return _b64url_encode(json.dumps(obj, separators=(",", ":")).encode("utf-8"))


def create_session_token(*, user_id: uuid.UUID, role: Role, secret: str, ttl_hours: int, now: int | None = None) -> str:
    """Sign an HS256 session token carrying user id and role."""
    if not secret:
        raise ValueError("jwt_secret_blank")
    issued = int(time.time()) if now is None else int(now)
    payload = {
        "sub": str(user_id),
        "role": role.value,
        "iat": issued,
        "exp": issued + ttl_hours * 3600,
    }
    signing_input = f"{_json_segment(_HEADER)}.{_json_segment(payload)}"
    sig = _b64url_encode(_hmac_sha256(secret.encode("utf-8"), signing_input.encode("ascii")))
    return f"{signing_input}.{sig}"


def decode_and_verify_jwt(token: str, secret: str) -> dict[str, Any]:
    """Verify HS256 JWT signature and minimal standard claims.

    Required claims:
    - sub: user id
    - role: one of Role
    - exp: unix epoch seconds
    """
    if not token.isascii():
        raise Unauthorized("Invalid token format")
    try:
        header_b64, payload_b64, sig_b64 = token.split(".")
    except ValueError as e:
        raise Unauthorized("Invalid token format") from e

    signing_input = f"{header_b64}.{payload_b64}".encode("ascii", errors="replace")
    expected_sig = _b64url_encode(_hmac_sha256(secret.encode("utf-8"), signing_input))
    if not hmac.compare_digest(expected_sig, sig_b64):
        raise Unauthorized("Invalid token signature")

    try:
        header = json.loads(_b64url_decode(header_b64))
        payload = json.loads(_b64url_decode(payload_b64))
    except (ValueError, UnicodeDecodeError) as e:
        raise Unauthorized("Invalid token encoding") from e

    if not isinstance(header, dict) or not isinstance(payload, dict):
        raise Unauthorized("Invalid token encoding")
    if header.get("alg") != "HS256" or header.get("typ") != "JWT":
        raise Unauthorized("Unsupported token header")

    try:
        exp_i = int(payload["exp"])
    except (KeyError, TypeError, ValueError) as e:
        raise Unauthorized("Invalid exp claim") from e
    if int(time.time()) >= exp_i:
        raise Unauthorized("Token expired")

    if "sub" not in payload or "role" not in payload:
        raise Unauthorized("Missing required claims")

    return payload


def _settings(request: Request) -> Settings:
    return request.app.state.settings


def get_current_principal(request: Request) -> Principal:
    """Extract and validate bearer token, returning Principal."""
    auth = request.headers.get("authorization")
    if not auth or not auth.lower().startswith("bearer "):
        raise Unauthorized("Access token required")
    token = auth.split(" ", 1)[1].strip()
    if not token:
        raise Unauthorized("Access token required")

    claims = decode_and_verify_jwt(token, _settings(request).jwt_secret)
    try:
        role = Role(str(claims["role"]))
    except ValueError as e:
        raise Unauthorized("Invalid role claim") from e
    try:
        user_id = uuid.UUID(str(claims["sub"]))
    except ValueError as e:
        raise Unauthorized("Invalid sub claim") from e

    return Principal(user_id=user_id, role=role)


def require_roles(*allowed_roles: Role) -> Callable[[Principal], Principal]:
    """FastAPI dependency factory enforcing explicit allow-list."""

    allowed = frozenset(allowed_roles)

    def _dep(principal: Principal = Depends(get_current_principal)) -> Principal:
        if not is_role_allowed(principal.role, allowed):
            raise Forbidden("Insufficient permissions")
        return principal

    return _dep
