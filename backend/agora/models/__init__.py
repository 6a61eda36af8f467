"""SQLAlchemy models package.

All ORM classes are imported here so mapper configuration (string-resolved
relationships) never depends on import order.
"""

from agora.models.company import GicsCompany, UserCompany
from agora.models.event import Event, EventType
from agora.models.rsvp import Rsvp, RsvpStatus
from agora.models.subscription import Subscription, SubscriptionStatus
from agora.models.user import User, UserRole

__all__ = [
    "Event",
    "EventType",
    "GicsCompany",
    "Rsvp",
    "RsvpStatus",
    "Subscription",
    "SubscriptionStatus",
    "User",
    "UserCompany",
    "UserRole",
]
