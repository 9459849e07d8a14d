import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, List, Optional

from sqlalchemy import Select, func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from connexa.application.interfaces import GroupRepositoryInterface
from connexa.domain.errors import AlreadyMemberError, GroupServiceError, PersistenceError
from connexa.domain.models import (
    Group,
    GroupDetail,
    GroupFilters,
    GroupMember,
    GroupSummary,
    Membership,
)
from connexa.models.course import Course
from connexa.models.study_group import StudyGroup
from connexa.models.study_group_member import StudyGroupMember
from connexa.models.user import User

logger = logging.getLogger(__name__)

# PostgreSQL SQLSTATE and SQLite extended error name for a UNIQUE violation.
# The only unique key a membership insert can hit is (group_id, user_id).
_UNIQUE_VIOLATION_CODES = frozenset({"23505", "SQLITE_CONSTRAINT_UNIQUE"})

_MEMBERSHIP_COLUMNS = (
    StudyGroupMember.id,
    StudyGroupMember.group_id,
    StudyGroupMember.user_id,
    StudyGroupMember.joined_at,
    StudyGroupMember.is_active,
)


def _is_unique_violation(exc: IntegrityError) -> bool:
    """Check the driver error, or the raw one an async adapter chained, for a UNIQUE code."""

    for error in (exc.orig, getattr(exc.orig, "__cause__", None)):
        code = getattr(error, "sqlstate", None) or getattr(error, "sqlite_errorname", None)
        if code in _UNIQUE_VIOLATION_CODES:
            return True
    return False


def _active_membership_exists(user_id: int):
    """Correlated EXISTS matching an active membership of ``user_id``."""

    return (
        select(StudyGroupMember.id)
        .where(
            StudyGroupMember.group_id == StudyGroup.id,
            StudyGroupMember.user_id == user_id,
            StudyGroupMember.is_active.is_(True),
        )
        .correlate(StudyGroup)
        .exists()
    )


def build_group_listing_query(
    filters: GroupFilters,
    viewer_id: Optional[int] = None,
) -> Select:
    """Build the SELECT backing the group listing.

    Only active groups are returned, newest first. ``is_member`` is projected
    only when a viewer is known.
    """

    member_count = (
        select(func.count(StudyGroupMember.id))
        .where(
            StudyGroupMember.group_id == StudyGroup.id,
            StudyGroupMember.is_active.is_(True),
        )
        .correlate(StudyGroup)
        .scalar_subquery()
    )

    stmt = (
        select(
            StudyGroup,
            User.full_name.label("creator_name"),
            member_count.label("member_count"),
        )
        .outerjoin(User, User.id == StudyGroup.created_by)
        .where(StudyGroup.is_active.is_(True))
    )

    if viewer_id is not None:
        stmt = stmt.add_columns(_active_membership_exists(viewer_id).label("is_member"))

    if filters.subject:
        stmt = stmt.where(StudyGroup.subject.icontains(filters.subject, autoescape=True))

    if filters.created_by is not None:
        stmt = stmt.where(StudyGroup.created_by == filters.created_by)

    if filters.member_of is not None:
        stmt = stmt.where(_active_membership_exists(filters.member_of))

    return stmt.order_by(StudyGroup.created_at.desc(), StudyGroup.id.desc())


def _group_fields(group: StudyGroup) -> dict[str, Any]:
    return {
        "id": group.id,
        "name": group.name,
        "description": group.description,
        "subject": group.subject,
        "created_by": group.created_by,
        "created_at": group.created_at,
        "updated_at": group.updated_at,
    }


class SQLAlchemyGroupRepository(GroupRepositoryInterface):
    """SQLAlchemy implementation of the study group repository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    @asynccontextmanager
    async def _unit_of_work(self) -> AsyncIterator[None]:
        """Roll back and surface store failures as PersistenceError."""

        try:
            yield
        except GroupServiceError:
            raise
        except (SQLAlchemyError, OSError) as exc:
            await self.session.rollback()
            logger.error("Study group persistence failure: %s", exc)
            raise PersistenceError() from exc

    async def create_group(
        self,
        name: str,
        description: Optional[str],
        subject: Optional[str],
        created_by: int,
    ) -> Group:
        async with self._unit_of_work():
            db_group = StudyGroup(
                name=name,
                description=description,
                subject=subject,
                created_by=created_by,
                is_active=True,
            )
            self.session.add(db_group)
            await self.session.commit()
            await self.session.refresh(db_group)
        return Group.model_validate(db_group)

    async def get_active_group(self, group_id: int) -> Optional[Group]:
        async with self._unit_of_work():
            result = await self.session.execute(
                select(StudyGroup).where(
                    StudyGroup.id == group_id,
                    StudyGroup.is_active.is_(True),
                )
            )
            db_group = result.scalar_one_or_none()
        return Group.model_validate(db_group) if db_group else None

    async def get_group_detail(self, group_id: int) -> Optional[GroupDetail]:
        async with self._unit_of_work():
            result = await self.session.execute(
                select(StudyGroup, User.full_name.label("creator_name"))
                .outerjoin(User, User.id == StudyGroup.created_by)
                .where(
                    StudyGroup.id == group_id,
                    StudyGroup.is_active.is_(True),
                )
            )
            row = result.one_or_none()
        if row is None:
            return None
        db_group, creator_name = row
        return GroupDetail(**_group_fields(db_group), creator_name=creator_name)

    async def deactivate_group(self, group_id: int) -> bool:
        async with self._unit_of_work():
            result = await self.session.execute(
                update(StudyGroup)
                .where(
                    StudyGroup.id == group_id,
                    StudyGroup.is_active.is_(True),
                )
                .values(is_active=False, updated_at=func.now())
                .execution_options(synchronize_session=False)
            )
            await self.session.commit()
        return result.rowcount > 0

    async def list_groups(
        self,
        filters: GroupFilters,
        viewer_id: Optional[int] = None,
    ) -> List[GroupSummary]:
        async with self._unit_of_work():
            result = await self.session.execute(
                build_group_listing_query(filters, viewer_id)
            )
            rows = result.all()

        summaries = []
        for row in rows:
            mapping = row._mapping
            summaries.append(
                GroupSummary(
                    **_group_fields(row[0]),
                    creator_name=mapping["creator_name"],
                    member_count=mapping["member_count"] or 0,
                    is_member=bool(mapping["is_member"]) if viewer_id is not None else None,
                )
            )
        return summaries

    async def list_active_members(self, group_id: int) -> List[GroupMember]:
        async with self._unit_of_work():
            result = await self.session.execute(
                select(
                    StudyGroupMember.id,
                    StudyGroupMember.user_id,
                    StudyGroupMember.joined_at,
                    User.full_name,
                    User.institutional_email,
                    Course.name.label("course_name"),
                )
                .join(User, User.id == StudyGroupMember.user_id)
                .outerjoin(Course, Course.id == User.course_id)
                .where(
                    StudyGroupMember.group_id == group_id,
                    StudyGroupMember.is_active.is_(True),
                )
                .order_by(StudyGroupMember.joined_at.asc(), StudyGroupMember.id.asc())
            )
            rows = result.all()
        return [GroupMember(**row._mapping) for row in rows]

    async def get_membership(
        self,
        group_id: int,
        user_id: int,
        lock: bool = False,
    ) -> Optional[Membership]:
        stmt = select(*_MEMBERSHIP_COLUMNS).where(
            StudyGroupMember.group_id == group_id,
            StudyGroupMember.user_id == user_id,
        )
        if lock:
            stmt = stmt.with_for_update()

        async with self._unit_of_work():
            result = await self.session.execute(stmt)
            row = result.one_or_none()
        return Membership(**row._mapping) if row else None

    async def add_membership(self, group_id: int, user_id: int) -> Membership:
        async with self._unit_of_work():
            db_membership = StudyGroupMember(
                group_id=group_id,
                user_id=user_id,
                is_active=True,
            )
            self.session.add(db_membership)
            try:
                await self.session.commit()
            except IntegrityError as exc:
                await self.session.rollback()
                if _is_unique_violation(exc):
                    # A concurrent join inserted the pair first.
                    raise AlreadyMemberError() from exc
                raise
            await self.session.refresh(db_membership)
        return Membership.model_validate(db_membership)

    async def reactivate_membership(self, membership_id: int) -> Membership:
        async with self._unit_of_work():
            result = await self.session.execute(
                update(StudyGroupMember)
                .where(StudyGroupMember.id == membership_id)
                .values(is_active=True, joined_at=func.now())
                .returning(*_MEMBERSHIP_COLUMNS)
                .execution_options(synchronize_session=False)
            )
            row = result.one()
            await self.session.commit()
        return Membership(**row._mapping)

    async def deactivate_membership(self, group_id: int, user_id: int) -> bool:
        async with self._unit_of_work():
            result = await self.session.execute(
                update(StudyGroupMember)
                .where(
                    StudyGroupMember.group_id == group_id,
                    StudyGroupMember.user_id == user_id,
                    StudyGroupMember.is_active.is_(True),
                )
                .values(is_active=False)
                .execution_options(synchronize_session=False)
            )
            await self.session.commit()
        return result.rowcount > 0

    async def is_active_member(self, group_id: int, user_id: int) -> bool:
        async with self._unit_of_work():
            result = await self.session.execute(
                select(
                    select(StudyGroupMember.id)
                    .where(
                        StudyGroupMember.group_id == group_id,
                        StudyGroupMember.user_id == user_id,
                        StudyGroupMember.is_active.is_(True),
                    )
                    .exists()
                )
            )
            return bool(result.scalar())
