"""SQLAlchemy model defining study groups."""

from __future__ import annotations

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
    true,
)
from sqlalchemy.orm import relationship

from connexa.models.base import Base


class StudyGroup(Base):
    """A student-created study group; retired groups keep their row."""

    __tablename__ = "study_groups"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    subject = Column(String(100), nullable=True)
    created_by = Column(
        Integer,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
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
    )
    is_active = Column(Boolean, nullable=False, default=True, server_default=true())

    __table_args__ = (
        Index("ix_study_groups_active_created", "is_active", "created_at"),
    )

    creator = relationship(
        "User",
        back_populates="created_groups",
        foreign_keys=[created_by],
    )
    memberships = relationship("StudyGroupMember", back_populates="group")


__all__ = ["StudyGroup"]
