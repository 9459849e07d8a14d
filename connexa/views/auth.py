"""Pydantic schemas related to authentication."""

from __future__ import annotations

from pydantic import BaseModel, EmailStr, Field, field_validator

from connexa.views.users import UserResponse


class LoginRequest(BaseModel):
    """Credentials submitted to obtain an access token."""

    institutional_email: EmailStr
    password: str = Field(min_length=1, max_length=128)

    @field_validator("institutional_email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()


class LoginData(BaseModel):
    """Payload returned after a successful login."""

    user: UserResponse
    token: str
    token_type: str = "bearer"
    expires_in: int = Field(
        default=0,
        description="Seconds until the token expires",
    )


class TokenData(BaseModel):
    """Payload returned when a token is refreshed."""

    token: str
    token_type: str = "bearer"
    expires_in: int = 0


__all__ = [
    "LoginRequest",
    "LoginData",
    "TokenData",
]
