"""SQLAlchemy model for study group memberships."""

from __future__ import annotations

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    UniqueConstraint,
    func,
    true,
)
from sqlalchemy.orm import relationship

from connexa.models.base import Base


class StudyGroupMember(Base):
    """Association between profiles and study groups.

    Leaving a group only clears ``is_active``; joining again reactivates the
    same row, so there is exactly one row per (group, user) pair.
    """

    __tablename__ = "study_group_members"

    id = Column(Integer, primary_key=True, index=True)
    group_id = Column(
        Integer,
        ForeignKey("study_groups.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(
        Integer,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    joined_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    is_active = Column(Boolean, nullable=False, default=True, server_default=true())

    __table_args__ = (
        UniqueConstraint(
            "group_id",
            "user_id",
            name="uq_study_group_members_group_user",
        ),
        Index("ix_study_group_members_group_active", "group_id", "is_active"),
    )

    group = relationship("StudyGroup", back_populates="memberships")
    user = relationship("User", back_populates="group_memberships", foreign_keys=[user_id])


__all__ = ["StudyGroupMember"]
