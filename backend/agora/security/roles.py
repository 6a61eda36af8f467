"""Role model for access control."""

from __future__ import annotations

from agora.models.user import UserRole as Role

# Roles allowed to read other users' RSVPs.
RSVP_OVERSIGHT_ROLES: frozenset[Role] = frozenset({Role.ANALYST_MANAGER, Role.IR_ADMIN})

# Roles allowed to create, update and delete events.
EVENT_ADMIN_ROLES: frozenset[Role] = frozenset({Role.IR_ADMIN})


def is_role_allowed(subject_role: Role, allowed: set[Role] | frozenset[Role]) -> bool:
    """Default-deny role check with explicit allow set."""
    return subject_role in allowed


__all__ = ["EVENT_ADMIN_ROLES", "RSVP_OVERSIGHT_ROLES", "Role", "is_role_allowed"]
