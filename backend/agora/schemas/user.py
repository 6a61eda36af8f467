from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from pydantic import Field

from agora.models.user import UserRole
from agora.schemas.base import ApiModel
from agora.schemas.company import UserCompanyRead


class UserSummary(ApiModel):
    """Public identity attached to RSVPs and subscriptions."""

    user_id: uuid.UUID
    first_name: str
    last_name: str
    email: str
    role: UserRole


class ManagerSummary(ApiModel):
    user_id: uuid.UUID
    first_name: str
    last_name: str
    email: str


class UserRead(ApiModel):
    user_id: uuid.UUID
    first_name: str
    last_name: str
    username: str
    email: str
    role: UserRole
    company_id: Optional[uuid.UUID] = None
    manager_id: Optional[uuid.UUID] = None
    created_at: datetime
    updated_at: datetime


class UserProfile(UserRead):
    company: Optional[UserCompanyRead] = None
    manager: Optional[ManagerSummary] = None


class SignupRequest(ApiModel):
    # Presence and enum checks happen in the service so failures carry
    # the documented messages.
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None
    company_id: Optional[uuid.UUID] = None
    manager_id: Optional[uuid.UUID] = None


class LoginRequest(ApiModel):
    username: Optional[str] = Field(None, description="Username or email")
    password: Optional[str] = None


class AuthResponse(ApiModel):
    message: str
    user: UserProfile
    token: str


class MeResponse(ApiModel):
    user: UserProfile
