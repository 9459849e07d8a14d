"""SQLAlchemy models for the MVC architecture."""

from .base import Base
from .course import Course  # noqa: F401
from .study_group import StudyGroup  # noqa: F401
from .study_group_member import StudyGroupMember  # noqa: F401
from .user import User  # noqa: F401

__all__ = [
    "Base",
    "Course",
    "User",
    "StudyGroup",
    "StudyGroupMember",
]
