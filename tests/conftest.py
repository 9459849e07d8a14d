"""Shared fixtures: in-memory and SQLite-backed group stores and test clients."""

from __future__ import annotations

import asyncio
import itertools
from datetime import datetime, timedelta, timezone
from pathlib import Path
import sys
from typing import List, Optional

import pytest
from fastapi import HTTPException, status
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from connexa.application.interfaces import GroupRepositoryInterface  # noqa: E402
from connexa.controllers.dependencies import (  # noqa: E402
    get_current_user,
    get_group_repository,
    get_optional_user,
)
from connexa.database import Database  # noqa: E402
from connexa.domain.errors import AlreadyMemberError  # noqa: E402
from connexa.domain.models import (  # noqa: E402
    Group,
    GroupDetail,
    GroupFilters,
    GroupMember,
    GroupSummary,
    Membership,
)
from connexa.main import app  # noqa: E402
from connexa.models import Course, User  # noqa: E402

BASE_TIME = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


class InMemoryGroupRepository(GroupRepositoryInterface):
    """Dict-backed store honouring the same contract as the SQL repository."""

    def __init__(self) -> None:
        self.users: dict[int, User] = {}
        self.groups: dict[int, Group] = {}
        self.memberships: dict[int, Membership] = {}
        self._group_ids = itertools.count(1)
        self._membership_ids = itertools.count(1)
        self._ticks = itertools.count(1)

    def now(self) -> datetime:
        # Strictly increasing so ordering by time is deterministic.
        return BASE_TIME + timedelta(seconds=next(self._ticks))

    def register_user(self, user: User) -> User:
        self.users[user.id] = user
        return user

    def _find_membership(self, group_id: int, user_id: int) -> Optional[Membership]:
        for membership in self.memberships.values():
            if membership.group_id == group_id and membership.user_id == user_id:
                return membership
        return None

    def _active_member_ids(self, group_id: int) -> list[int]:
        return [
            membership.user_id
            for membership in self.memberships.values()
            if membership.group_id == group_id and membership.is_active
        ]

    def _creator_name(self, group: Group) -> Optional[str]:
        creator = self.users.get(group.created_by)
        return creator.full_name if creator else None

    async def create_group(self, name, description, subject, created_by) -> Group:
        timestamp = self.now()
        group = Group(
            id=next(self._group_ids),
            name=name,
            description=description,
            subject=subject,
            created_by=created_by,
            created_at=timestamp,
            updated_at=timestamp,
            is_active=True,
        )
        self.groups[group.id] = group
        return group

    async def get_active_group(self, group_id: int) -> Optional[Group]:
        group = self.groups.get(group_id)
        return group if group and group.is_active else None

    async def get_group_detail(self, group_id: int) -> Optional[GroupDetail]:
        group = await self.get_active_group(group_id)
        if group is None:
            return None
        return GroupDetail(
            **group.model_dump(exclude={"is_active"}),
            creator_name=self._creator_name(group),
        )

    async def deactivate_group(self, group_id: int) -> bool:
        group = await self.get_active_group(group_id)
        if group is None:
            return False
        self.groups[group_id] = group.model_copy(
            update={"is_active": False, "updated_at": self.now()}
        )
        return True

    async def list_groups(
        self,
        filters: GroupFilters,
        viewer_id: Optional[int] = None,
    ) -> List[GroupSummary]:
        selected = []
        for group in self.groups.values():
            if not group.is_active:
                continue
            if filters.subject and filters.subject.lower() not in (group.subject or "").lower():
                continue
            if filters.created_by is not None and group.created_by != filters.created_by:
                continue
            members = self._active_member_ids(group.id)
            if filters.member_of is not None and filters.member_of not in members:
                continue
            selected.append(
                GroupSummary(
                    **group.model_dump(exclude={"is_active"}),
                    creator_name=self._creator_name(group),
                    member_count=len(members),
                    is_member=(viewer_id in members) if viewer_id is not None else None,
                )
            )
        return sorted(selected, key=lambda item: (item.created_at, item.id), reverse=True)

    async def list_active_members(self, group_id: int) -> List[GroupMember]:
        active = [
            membership
            for membership in self.memberships.values()
            if membership.group_id == group_id and membership.is_active
        ]
        active.sort(key=lambda membership: (membership.joined_at, membership.id))
        members = []
        for membership in active:
            user = self.users[membership.user_id]
            members.append(
                GroupMember(
                    id=membership.id,
                    user_id=user.id,
                    full_name=user.full_name,
                    institutional_email=user.institutional_email,
                    course_name=user.course_name,
                    joined_at=membership.joined_at,
                )
            )
        return members

    async def get_membership(self, group_id, user_id, lock=False) -> Optional[Membership]:
        return self._find_membership(group_id, user_id)

    async def add_membership(self, group_id: int, user_id: int) -> Membership:
        if self._find_membership(group_id, user_id) is not None:
            raise AlreadyMemberError()
        membership = Membership(
            id=next(self._membership_ids),
            group_id=group_id,
            user_id=user_id,
            joined_at=self.now(),
            is_active=True,
        )
        self.memberships[membership.id] = membership
        return membership

    async def reactivate_membership(self, membership_id: int) -> Membership:
        membership = self.memberships[membership_id].model_copy(
            update={"is_active": True, "joined_at": self.now()}
        )
        self.memberships[membership_id] = membership
        return membership

    async def deactivate_membership(self, group_id: int, user_id: int) -> bool:
        membership = self._find_membership(group_id, user_id)
        if membership is None or not membership.is_active:
            return False
        self.memberships[membership.id] = membership.model_copy(update={"is_active": False})
        return True

    async def is_active_member(self, group_id: int, user_id: int) -> bool:
        return user_id in self._active_member_ids(group_id)


def make_user(user_id: int, full_name: str, email: str, course: Optional[str] = None) -> User:
    user = User(
        id=user_id,
        full_name=full_name,
        institutional_email=email,
        password_hash="unused",
        current_semester=3,
        created_at=BASE_TIME,
    )
    if course is not None:
        user.course = Course(id=user_id, name=course)
        user.course_id = user_id
    return user


@pytest.fixture
def repository() -> InMemoryGroupRepository:
    return InMemoryGroupRepository()


@pytest.fixture
def creator(repository: InMemoryGroupRepository) -> User:
    return repository.register_user(
        make_user(42, "Ana Souza", "ana.souza@univ.edu.br", course="Engenharia de Software")
    )


@pytest.fixture
def student(repository: InMemoryGroupRepository) -> User:
    return repository.register_user(
        make_user(7, "Bruno Lima", "bruno.lima@univ.edu.br", course="Direito")
    )


@pytest.fixture
def outsider(repository: InMemoryGroupRepository) -> User:
    return repository.register_user(make_user(99, "Carla Dias", "carla.dias@univ.edu"))


class Identity:
    """Mutable handle deciding which user the overridden auth dependency returns."""

    def __init__(self) -> None:
        self.user: Optional[User] = None

    def act_as(self, user: Optional[User]) -> None:
        self.user = user


@pytest.fixture
def identity() -> Identity:
    return Identity()


@pytest.fixture
def client(repository: InMemoryGroupRepository, identity: Identity):
    """Test client whose auth and repository dependencies are replaced."""

    async def fake_get_current_user():
        if identity.user is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Not authenticated",
            )
        return identity.user

    async def fake_get_optional_user():
        return identity.user

    def fake_get_group_repository():
        return repository

    app.dependency_overrides[get_current_user] = fake_get_current_user
    app.dependency_overrides[get_optional_user] = fake_get_optional_user
    app.dependency_overrides[get_group_repository] = fake_get_group_repository

    yield TestClient(app)

    app.dependency_overrides.clear()


async def _seed_profiles(database: Database) -> None:
    async with database.session() as session:
        law = Course(id=1, name="Direito")
        session.add_all(
            [
                law,
                User(
                    id=42,
                    full_name="Ana Souza",
                    institutional_email="ana.souza@univ.edu.br",
                    password_hash="unused",
                    current_semester=5,
                ),
                User(
                    id=7,
                    full_name="Bruno Lima",
                    institutional_email="bruno.lima@univ.edu.br",
                    password_hash="unused",
                    course=law,
                    current_semester=3,
                ),
                User(
                    id=99,
                    full_name="Carla Dias",
                    institutional_email="carla.dias@univ.edu",
                    password_hash="unused",
                    current_semester=1,
                ),
            ]
        )
        await session.commit()


@pytest.fixture
def sqlite_database(tmp_path) -> Database:
    """File-backed SQLite database with the schema and three profiles (42, 7, 99)."""

    # NullPool: each test request runs on its own event loop.
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'connexa.db'}", pooled=False)
    asyncio.run(database.init_models())
    asyncio.run(_seed_profiles(database))
    yield database
    asyncio.run(database.dispose())


@pytest.fixture
def database_client(sqlite_database: Database):
    """Test client running the real auth and repository dependencies on SQLite."""

    app.state.database = sqlite_database

    yield TestClient(app)

    app.dependency_overrides.clear()
    del app.state.database
