"""Signup, login and current-profile endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from agora.api.deps import get_db_session, get_settings
from agora.core.config import Settings
from agora.schemas.user import AuthResponse, LoginRequest, MeResponse, SignupRequest, UserProfile
from agora.security.auth import Principal, get_current_principal
from agora.services.auth_service import AuthService


router = APIRouter()


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    payload: SignupRequest,
    db: Session = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> AuthResponse:
    issued = await AuthService(db, settings).signup(payload.model_dump())
    return AuthResponse(
        message="User created successfully",
        user=UserProfile.model_validate(issued.user),
        token=issued.token,
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    payload: LoginRequest,
    db: Session = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> AuthResponse:
    """Log in with a username or an email address."""
    issued = await AuthService(db, settings).login(payload.username, payload.password)
    return AuthResponse(
        message="Login successful",
        user=UserProfile.model_validate(issued.user),
        token=issued.token,
    )


@router.get("/me", response_model=MeResponse)
async def me(
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> MeResponse:
    user = await AuthService(db, settings).me(principal.user_id)
    return MeResponse(user=UserProfile.model_validate(user))
