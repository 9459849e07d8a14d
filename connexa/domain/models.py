from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class Group(BaseModel):
    """Domain model for a study group"""
    id: int
    name: str
    description: Optional[str] = None
    subject: Optional[str] = None
    created_by: int
    created_at: datetime
    updated_at: datetime
    is_active: bool = True

    class Config:
        from_attributes = True


class GroupSummary(BaseModel):
    """Active group as shown in listings, relative to the viewer"""
    id: int
    name: str
    description: Optional[str] = None
    subject: Optional[str] = None
    created_by: int
    created_at: datetime
    updated_at: datetime
    creator_name: Optional[str] = None
    member_count: int = 0
    # None when the listing was requested anonymously
    is_member: Optional[bool] = None


class GroupMember(BaseModel):
    """Active member of a group with profile data"""
    id: int
    user_id: int
    full_name: str
    institutional_email: Optional[str] = None
    course_name: Optional[str] = None
    joined_at: datetime


class GroupDetail(BaseModel):
    """Active group with its current members"""
    id: int
    name: str
    description: Optional[str] = None
    subject: Optional[str] = None
    created_by: int
    created_at: datetime
    updated_at: datetime
    creator_name: Optional[str] = None
    members: List[GroupMember] = []
    member_count: int = 0


class Membership(BaseModel):
    """Membership row between a user and a group"""
    id: int
    group_id: int
    user_id: int
    joined_at: datetime
    is_active: bool

    class Config:
        from_attributes = True


@dataclass(frozen=True)
class GroupFilters:
    """Listing filters, combined with AND."""

    subject: Optional[str] = None
    created_by: Optional[int] = None
    member_of: Optional[int] = None
