"""Small input coercion helpers shared by services."""

from __future__ import annotations

import enum
from typing import Optional, TypeVar

from agora.core.errors import InvalidArgument


E = TypeVar("E", bound=enum.Enum)


def coerce_enum(enum_cls: type[E], value: object, message: str) -> E:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value))
    except ValueError as e:
        raise InvalidArgument(message) from e


def coerce_optional_enum(enum_cls: type[E], value: object, message: str) -> Optional[E]:
    if value is None or value == "":
        return None
    return coerce_enum(enum_cls, value, message)


def blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def clean(value: Optional[str]) -> Optional[str]:
    """Strip surrounding whitespace; empty strings become None."""
    if value is None:
        return None
    value = value.strip()
    return value or None
