"""Domain errors raised by the study group use cases."""

from __future__ import annotations


class GroupServiceError(Exception):
    """Base class for failures surfaced by group operations."""

    status_code = 400
    message = "Group operation failed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        self.message = message or self.message


class GroupNotFoundError(GroupServiceError):
    status_code = 404
    message = "Study group not found"


class AlreadyMemberError(GroupServiceError):
    status_code = 409
    message = "You are already a member of this group"


class NotAMemberError(GroupServiceError):
    status_code = 404
    message = "You are not a member of this group"


class CreatorCannotLeaveError(GroupServiceError):
    status_code = 403
    message = "The group creator cannot leave the group; delete it instead"


class NotGroupCreatorError(GroupServiceError):
    status_code = 403
    message = "Only the group creator can delete this group"


class InvalidIdentifierError(GroupServiceError):
    status_code = 400
    message = "Invalid group id"


class PersistenceError(GroupServiceError):
    """The store was unreachable or rejected the statement."""

    status_code = 500
    message = "Database error"


__all__ = [
    "GroupServiceError",
    "GroupNotFoundError",
    "AlreadyMemberError",
    "NotAMemberError",
    "CreatorCannotLeaveError",
    "NotGroupCreatorError",
    "InvalidIdentifierError",
    "PersistenceError",
]
