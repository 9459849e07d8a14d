"""Authentication controller providing login and token refresh endpoints."""

from __future__ import annotations

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select

from connexa.config.settings import settings
from connexa.controllers.dependencies import SessionDep, optional_oauth2_scheme
from connexa.models.user import User as UserModel
from connexa.telemetry import increment_login
from connexa.utils import (
    AuthenticationError,
    create_access_token,
    refresh_access_token,
    verify_password,
)
from connexa.views import (
    LoginData,
    LoginRequest,
    SuccessResponse,
    TokenData,
    UserResponse,
)

router = APIRouter(prefix="/api/users", tags=["auth"])


def _expires_in_seconds() -> int:
    return settings.security.access_token_expires_minutes * 60


@router.post("/login", response_model=SuccessResponse)
async def login(
    payload: LoginRequest,
    session: SessionDep,
) -> SuccessResponse:
    """Validate credentials and issue a JWT access token."""

    result = await session.execute(
        select(UserModel).where(
            UserModel.institutional_email == payload.institutional_email
        )
    )
    user = result.scalar_one_or_none()

    if not user or not verify_password(payload.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )

    access_token = create_access_token(subject=str(user.id), user=user)
    increment_login()

    data = LoginData(
        user=UserResponse.model_validate(user),
        token=access_token,
        expires_in=_expires_in_seconds(),
    )
    return SuccessResponse(message="Login successful", data=data.model_dump())


@router.post("/refresh-token", response_model=SuccessResponse)
async def refresh_token(
    token: Annotated[Optional[str], Depends(optional_oauth2_scheme)],
) -> SuccessResponse:
    """Exchange a still-valid bearer token for a fresh one."""

    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Bearer token required for renewal",
        )

    try:
        new_token = refresh_access_token(token)
    except AuthenticationError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token renewal failed",
        ) from exc

    data = TokenData(token=new_token, expires_in=_expires_in_seconds())
    return SuccessResponse(message="Token renewed successfully", data=data.model_dump())
