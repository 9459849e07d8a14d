from abc import ABC, abstractmethod
from typing import List, Optional

from connexa.domain.models import (
    Group,
    GroupDetail,
    GroupFilters,
    GroupMember,
    GroupSummary,
    Membership,
)


class GroupRepositoryInterface(ABC):
    """Persistence contract for study groups and their memberships.

    Mutating methods commit their own unit of work. Reads issued earlier in
    the same request share that transaction, so a lookup followed by a write
    is applied atomically.
    """

    @abstractmethod
    async def create_group(
        self,
        name: str,
        description: Optional[str],
        subject: Optional[str],
        created_by: int,
    ) -> Group:
        ...

    @abstractmethod
    async def get_active_group(self, group_id: int) -> Optional[Group]:
        ...

    @abstractmethod
    async def get_group_detail(self, group_id: int) -> Optional[GroupDetail]:
        """Return the active group with creator name, without members."""
        ...

    @abstractmethod
    async def deactivate_group(self, group_id: int) -> bool:
        """Retire an active group. False when it was missing or already retired."""
        ...

    @abstractmethod
    async def list_groups(
        self,
        filters: GroupFilters,
        viewer_id: Optional[int] = None,
    ) -> List[GroupSummary]:
        ...

    @abstractmethod
    async def list_active_members(self, group_id: int) -> List[GroupMember]:
        ...

    @abstractmethod
    async def get_membership(
        self,
        group_id: int,
        user_id: int,
        lock: bool = False,
    ) -> Optional[Membership]:
        ...

    @abstractmethod
    async def add_membership(self, group_id: int, user_id: int) -> Membership:
        """Insert an active membership; raises AlreadyMemberError on a duplicate pair."""
        ...

    @abstractmethod
    async def reactivate_membership(self, membership_id: int) -> Membership:
        ...

    @abstractmethod
    async def deactivate_membership(self, group_id: int, user_id: int) -> bool:
        ...

    @abstractmethod
    async def is_active_member(self, group_id: int, user_id: int) -> bool:
        ...
