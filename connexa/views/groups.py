"""Pydantic schemas for study group management."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

_GROUP_TEXT_PATTERN = re.compile(r"^[a-zA-ZÀ-ÿ0-9\s\-_.]*$")


class GroupCreateRequest(BaseModel):
    """Payload to create a study group."""

    name: str = Field(..., max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    subject: Optional[str] = Field(None, max_length=100)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        value = value.strip()
        if not 3 <= len(value) <= 100:
            raise ValueError("Group name must be between 3 and 100 characters")
        if not _GROUP_TEXT_PATTERN.match(value):
            raise ValueError(
                "Group name can only contain letters, numbers, spaces and - _ ."
            )
        return value

    @field_validator("description")
    @classmethod
    def strip_description(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        return value.strip() or None

    @field_validator("subject")
    @classmethod
    def validate_subject(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip()
        if not _GROUP_TEXT_PATTERN.match(value):
            raise ValueError(
                "Subject can only contain letters, numbers, spaces and - _ ."
            )
        return value or None


class GroupResponse(BaseModel):
    """A study group record as stored."""

    id: int
    name: str
    description: Optional[str] = None
    subject: Optional[str] = None
    created_by: int
    created_at: datetime
    updated_at: datetime
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


class GroupSummaryResponse(BaseModel):
    """Group as shown in listings."""

    id: int
    name: str
    description: Optional[str] = None
    subject: Optional[str] = None
    created_by: int
    created_at: datetime
    updated_at: datetime
    creator_name: Optional[str] = None
    member_count: int
    is_member: Optional[bool] = None

    model_config = ConfigDict(from_attributes=True)


class GroupMemberResponse(BaseModel):
    id: int
    user_id: int
    full_name: str
    institutional_email: Optional[str] = None
    course_name: Optional[str] = None
    joined_at: datetime

    model_config = ConfigDict(from_attributes=True)


class GroupDetailResponse(BaseModel):
    """Group with its active members, oldest join first."""

    id: int
    name: str
    description: Optional[str] = None
    subject: Optional[str] = None
    created_by: int
    created_at: datetime
    updated_at: datetime
    creator_name: Optional[str] = None
    members: list[GroupMemberResponse]
    member_count: int

    model_config = ConfigDict(from_attributes=True)


class MembershipResponse(BaseModel):
    id: int
    group_id: int
    user_id: int
    joined_at: datetime
    is_active: bool

    model_config = ConfigDict(from_attributes=True)
