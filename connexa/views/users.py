"""Pydantic schemas for user interactions."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

_FULL_NAME_PATTERN = re.compile(r"^[a-zA-ZÀ-ÿ\s]+$")
_PASSWORD_SPECIALS = "@$!%*?&"
_PASSWORD_PATTERN = re.compile(r"^[A-Za-z\d@$!%*?&]+$")
_INSTITUTIONAL_SUFFIXES = (".edu", ".edu.br")


class UserRegistrationRequest(BaseModel):
    """Request model for student registration."""

    full_name: str = Field(..., min_length=2, max_length=255)
    institutional_email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    course_id: int = Field(..., ge=1)
    current_semester: int = Field(..., ge=1, le=20)

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 2:
            raise ValueError("Full name must be between 2 and 255 characters")
        if not _FULL_NAME_PATTERN.match(value):
            raise ValueError("Full name can only contain letters and spaces")
        return value

    @field_validator("institutional_email")
    @classmethod
    def validate_institutional_email(cls, value: str) -> str:
        value = value.strip().lower()
        if not value.endswith(_INSTITUTIONAL_SUFFIXES):
            raise ValueError("Email must be a valid institutional email")
        return value

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        if not re.search(r"[a-z]", value):
            raise ValueError("Password must contain at least one lowercase letter")
        if not re.search(r"[A-Z]", value):
            raise ValueError("Password must contain at least one uppercase letter")
        if not re.search(r"\d", value):
            raise ValueError("Password must contain at least one digit")
        if not any(char in _PASSWORD_SPECIALS for char in value):
            raise ValueError(
                f"Password must contain at least one special character ({_PASSWORD_SPECIALS})"
            )
        if not _PASSWORD_PATTERN.match(value):
            raise ValueError("Password contains unsupported characters")
        return value


class UserResponse(BaseModel):
    """Public profile data; never includes the password hash."""

    id: int
    full_name: str
    institutional_email: EmailStr
    course_id: Optional[int] = None
    course_name: Optional[str] = None
    current_semester: Optional[int] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
