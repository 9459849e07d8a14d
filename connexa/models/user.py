"""SQLAlchemy model for student profiles."""

from __future__ import annotations

from sqlalchemy import Column, DateTime, ForeignKey, Integer, SmallInteger, String, func
from sqlalchemy.orm import relationship

from connexa.models.base import Base


class User(Base):
    """A student identified by an institutional email address."""

    __tablename__ = "profiles"

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String(255), nullable=False)
    institutional_email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(256), nullable=False)
    course_id = Column(
        Integer,
        ForeignKey("courses.id", ondelete="SET NULL"),
        nullable=True,
    )
    current_semester = Column(SmallInteger, nullable=True)
    course = relationship("Course", back_populates="students", lazy="joined")
    created_groups = relationship(
        "StudyGroup",
        back_populates="creator",
        foreign_keys="StudyGroup.created_by",
    )
    group_memberships = relationship(
        "StudyGroupMember",
        back_populates="user",
        foreign_keys="StudyGroupMember.user_id",
    )
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    @property
    def course_name(self) -> str | None:
        return self.course.name if self.course else None


__all__ = ["User"]
