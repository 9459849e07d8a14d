"""Pydantic schemas used as views in the MVC architecture."""

from .auth import LoginData, LoginRequest, TokenData
from .common import ErrorDetail, ErrorResponse, SuccessResponse
from .courses import CourseResponse
from .groups import (
    GroupCreateRequest,
    GroupDetailResponse,
    GroupMemberResponse,
    GroupResponse,
    GroupSummaryResponse,
    MembershipResponse,
)
from .users import UserRegistrationRequest, UserResponse

__all__ = [
    "UserRegistrationRequest",
    "UserResponse",
    "CourseResponse",
    "GroupCreateRequest",
    "GroupResponse",
    "GroupSummaryResponse",
    "GroupMemberResponse",
    "GroupDetailResponse",
    "MembershipResponse",
    "ErrorDetail",
    "ErrorResponse",
    "SuccessResponse",
    "LoginRequest",
    "LoginData",
    "TokenData",
]
