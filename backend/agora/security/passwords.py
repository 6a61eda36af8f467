"""Password hashing (bcrypt)."""

from __future__ import annotations

import bcrypt

# bcrypt only considers the first 72 bytes of input.
_MAX_BCRYPT_BYTES = 72


def get_password_hash(password: str) -> str:
    if not password:
        raise ValueError("password_blank")
    salt = bcrypt.gensalt()
    return bcrypt.hashpw(password.encode("utf-8")[:_MAX_BCRYPT_BYTES], salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not plain_password or not hashed_password:
        return False
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8")[:_MAX_BCRYPT_BYTES],
            hashed_password.encode("utf-8"),
        )
    except ValueError:
        return False
