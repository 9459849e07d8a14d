"""Endpoints for study group lifecycle and membership management."""

from __future__ import annotations

from typing import Annotated, Optional

from fastapi import APIRouter, Query, status

from connexa.application.use_cases.group_use_cases import (
    CheckMembershipUseCase,
    CreateGroupUseCase,
    DeleteGroupUseCase,
    GetGroupUseCase,
    JoinGroupUseCase,
    LeaveGroupUseCase,
    ListGroupsUseCase,
)
from connexa.controllers.dependencies import (
    CurrentUserDep,
    GroupRepositoryDep,
    OptionalUserDep,
)
from connexa.domain.errors import InvalidIdentifierError
from connexa.domain.models import GroupFilters
from connexa.telemetry import record_group_event
from connexa.views import (
    GroupCreateRequest,
    GroupDetailResponse,
    GroupResponse,
    GroupSummaryResponse,
    MembershipResponse,
    SuccessResponse,
)

router = APIRouter(prefix="/api/users/groups", tags=["groups"])

# Id columns are 32-bit INTEGER.
MAX_GROUP_ID = 2**31 - 1


def _parse_group_id(raw_id: str) -> int:
    """Accept only decimal integers in the INTEGER column range as group ids."""

    candidate = raw_id.strip()
    if not (candidate.isascii() and candidate.isdigit()):
        raise InvalidIdentifierError()
    group_id = int(candidate)
    if not 1 <= group_id <= MAX_GROUP_ID:
        raise InvalidIdentifierError()
    return group_id


@router.post(
    "/create",
    response_model=SuccessResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_group(
    payload: GroupCreateRequest,
    current_user: CurrentUserDep,
    repository: GroupRepositoryDep,
) -> SuccessResponse:
    """Create a study group owned by the caller."""

    group = await CreateGroupUseCase(repository).execute(
        name=payload.name,
        description=payload.description,
        subject=payload.subject,
        created_by=current_user.id,
    )
    record_group_event("created")
    return SuccessResponse(
        message="Study group created successfully",
        data={"group": GroupResponse.model_validate(group).model_dump()},
    )


@router.get("", response_model=SuccessResponse)
async def list_groups(
    current_user: OptionalUserDep,
    repository: GroupRepositoryDep,
    subject: Annotated[Optional[str], Query(max_length=100)] = None,
    my_groups: bool = False,
    member_of: bool = False,
) -> SuccessResponse:
    """List active groups; ``my_groups``/``member_of`` only apply to signed-in callers."""

    viewer_id = current_user.id if current_user is not None else None
    filters = GroupFilters(
        subject=subject.strip() if subject and subject.strip() else None,
        created_by=viewer_id if my_groups else None,
        member_of=viewer_id if member_of else None,
    )

    groups = await ListGroupsUseCase(repository).execute(filters, viewer_id)
    exclude = {"is_member"} if viewer_id is None else None
    return SuccessResponse(
        message="Study groups retrieved successfully",
        data={
            "groups": [
                GroupSummaryResponse.model_validate(group).model_dump(exclude=exclude)
                for group in groups
            ]
        },
    )


@router.get("/{group_id}", response_model=SuccessResponse)
async def get_group(
    group_id: str,
    repository: GroupRepositoryDep,
) -> SuccessResponse:
    """Return a group with its active members."""

    detail = await GetGroupUseCase(repository).execute(_parse_group_id(group_id))
    return SuccessResponse(
        message="Study group retrieved successfully",
        data={"group": GroupDetailResponse.model_validate(detail).model_dump()},
    )


@router.delete("/{group_id}", response_model=SuccessResponse)
async def delete_group(
    group_id: str,
    current_user: CurrentUserDep,
    repository: GroupRepositoryDep,
) -> SuccessResponse:
    """Retire a group. Only its creator may do this."""

    await DeleteGroupUseCase(repository).execute(
        _parse_group_id(group_id),
        requester_id=current_user.id,
    )
    record_group_event("deleted")
    return SuccessResponse(message="Study group deleted successfully")


@router.post(
    "/{group_id}/join",
    response_model=SuccessResponse,
    status_code=status.HTTP_201_CREATED,
)
async def join_group(
    group_id: str,
    current_user: CurrentUserDep,
    repository: GroupRepositoryDep,
) -> SuccessResponse:
    membership = await JoinGroupUseCase(repository).execute(
        _parse_group_id(group_id),
        current_user.id,
    )
    record_group_event("joined")
    return SuccessResponse(
        message="You joined the group successfully",
        data={"membership": MembershipResponse.model_validate(membership).model_dump()},
    )


@router.post("/{group_id}/leave", response_model=SuccessResponse)
async def leave_group(
    group_id: str,
    current_user: CurrentUserDep,
    repository: GroupRepositoryDep,
) -> SuccessResponse:
    await LeaveGroupUseCase(repository).execute(
        _parse_group_id(group_id),
        current_user.id,
    )
    record_group_event("left")
    return SuccessResponse(message="You left the group successfully")


@router.get("/{group_id}/membership", response_model=SuccessResponse)
async def get_membership_status(
    group_id: str,
    current_user: CurrentUserDep,
    repository: GroupRepositoryDep,
) -> SuccessResponse:
    is_member = await CheckMembershipUseCase(repository).execute(
        _parse_group_id(group_id),
        current_user.id,
    )
    return SuccessResponse(
        message="Membership status retrieved successfully",
        data={"is_member": is_member},
    )
