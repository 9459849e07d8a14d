import logging
from typing import List, Optional

from connexa.application.interfaces import GroupRepositoryInterface
from connexa.domain.errors import (
    AlreadyMemberError,
    CreatorCannotLeaveError,
    GroupNotFoundError,
    NotAMemberError,
    NotGroupCreatorError,
)
from connexa.domain.models import (
    Group,
    GroupDetail,
    GroupFilters,
    GroupSummary,
    Membership,
)

logger = logging.getLogger(__name__)


class CreateGroupUseCase:
    """Use case for creating a study group"""

    def __init__(self, group_repository: GroupRepositoryInterface):
        self.group_repository = group_repository

    async def execute(
        self,
        name: str,
        created_by: int,
        description: Optional[str] = None,
        subject: Optional[str] = None,
    ) -> Group:
        group = await self.group_repository.create_group(
            name=name,
            description=description,
            subject=subject,
            created_by=created_by,
        )
        logger.info("Study group %s created by user %s", group.id, created_by)
        return group


class DeleteGroupUseCase:
    """Retire a group. Only its creator may do so, and only once."""

    def __init__(self, group_repository: GroupRepositoryInterface):
        self.group_repository = group_repository

    async def execute(self, group_id: int, requester_id: int) -> None:
        group = await self.group_repository.get_active_group(group_id)
        if group is None:
            raise GroupNotFoundError()

        if group.created_by != requester_id:
            raise NotGroupCreatorError()

        if not await self.group_repository.deactivate_group(group_id):
            # Retired by a concurrent request between the lookup and the update.
            raise GroupNotFoundError()

        logger.info("Study group %s retired by user %s", group_id, requester_id)


class ListGroupsUseCase:
    """Use case for listing active groups"""

    def __init__(self, group_repository: GroupRepositoryInterface):
        self.group_repository = group_repository

    async def execute(
        self,
        filters: Optional[GroupFilters] = None,
        viewer_id: Optional[int] = None,
    ) -> List[GroupSummary]:
        filters = filters or GroupFilters()
        if filters.member_of is not None and viewer_id is None:
            # Membership filtering needs a known viewer; anonymous requests ignore it.
            filters = GroupFilters(subject=filters.subject, created_by=filters.created_by)

        return await self.group_repository.list_groups(filters, viewer_id)


class GetGroupUseCase:
    """Use case for retrieving a group with its active members"""

    def __init__(self, group_repository: GroupRepositoryInterface):
        self.group_repository = group_repository

    async def execute(self, group_id: int) -> GroupDetail:
        detail = await self.group_repository.get_group_detail(group_id)
        if detail is None:
            raise GroupNotFoundError()

        members = await self.group_repository.list_active_members(group_id)
        return detail.model_copy(
            update={"members": members, "member_count": len(members)}
        )


class JoinGroupUseCase:
    """Join a group, reactivating a previous membership when one exists.

    absent -> active: insert a new row.
    inactive -> active: flip the flag and refresh ``joined_at``.
    active: rejected with AlreadyMemberError, nothing is written.
    """

    def __init__(self, group_repository: GroupRepositoryInterface):
        self.group_repository = group_repository

    async def execute(self, group_id: int, user_id: int) -> Membership:
        group = await self.group_repository.get_active_group(group_id)
        if group is None:
            raise GroupNotFoundError()

        membership = await self.group_repository.get_membership(
            group_id, user_id, lock=True
        )
        if membership is not None and membership.is_active:
            raise AlreadyMemberError()

        if membership is not None:
            membership = await self.group_repository.reactivate_membership(membership.id)
            logger.info("User %s rejoined study group %s", user_id, group_id)
        else:
            membership = await self.group_repository.add_membership(group_id, user_id)
            logger.info("User %s joined study group %s", user_id, group_id)

        return membership


class LeaveGroupUseCase:
    """Leave a group. The creator is never allowed to leave."""

    def __init__(self, group_repository: GroupRepositoryInterface):
        self.group_repository = group_repository

    async def execute(self, group_id: int, user_id: int) -> None:
        group = await self.group_repository.get_active_group(group_id)
        if group is None:
            raise GroupNotFoundError()

        if group.created_by == user_id:
            raise CreatorCannotLeaveError()

        membership = await self.group_repository.get_membership(
            group_id, user_id, lock=True
        )
        if membership is None or not membership.is_active:
            raise NotAMemberError()

        if not await self.group_repository.deactivate_membership(group_id, user_id):
            raise NotAMemberError()

        logger.info("User %s left study group %s", user_id, group_id)


class CheckMembershipUseCase:
    """Use case for checking whether a user is an active member"""

    def __init__(self, group_repository: GroupRepositoryInterface):
        self.group_repository = group_repository

    async def execute(self, group_id: int, user_id: int) -> bool:
        group = await self.group_repository.get_active_group(group_id)
        if group is None:
            raise GroupNotFoundError()

        return await self.group_repository.is_active_member(group_id, user_id)
