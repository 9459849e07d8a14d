"""Common FastAPI dependencies reused across controllers."""

from __future__ import annotations

from typing import Annotated, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from connexa.application.interfaces import GroupRepositoryInterface
from connexa.database import get_session
from connexa.infrastructure.persistence.repositories_sqlalchemy import (
    SQLAlchemyGroupRepository,
)
from connexa.models.user import User as UserModel
from connexa.utils import AuthenticationError, TokenExpiredError, decode_access_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/users/login")
optional_oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl="/api/users/login",
    auto_error=False,
)
SessionDep = Annotated[AsyncSession, Depends(get_session)]


async def _load_user(session: AsyncSession, user_id: int) -> UserModel | None:
    result = await session.execute(select(UserModel).where(UserModel.id == user_id))
    return result.scalar_one_or_none()


async def get_current_user(
    request: Request,
    token: Annotated[str, Depends(oauth2_scheme)],
    session: SessionDep,
) -> UserModel:
    """Resolve and validate the user referenced by the bearer token."""

    try:
        payload = decode_access_token(token)
        user_id = payload.user_id
    except TokenExpiredError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token expired",
        ) from None
    except (AuthenticationError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        ) from None

    user = await _load_user(session, user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )

    request.state.user_id = user.id
    return user


async def get_optional_user(
    request: Request,
    token: Annotated[Optional[str], Depends(optional_oauth2_scheme)],
    session: SessionDep,
) -> UserModel | None:
    """Resolve the caller when a valid bearer token is present, else None."""

    if not token:
        return None

    try:
        payload = decode_access_token(token)
        user_id = payload.user_id
    except (AuthenticationError, ValueError):
        return None

    user = await _load_user(session, user_id)
    if user is not None:
        request.state.user_id = user.id
    return user


def get_group_repository(session: SessionDep) -> GroupRepositoryInterface:
    """Bind the group repository to the request's session."""

    return SQLAlchemyGroupRepository(session)


CurrentUserDep = Annotated[UserModel, Depends(get_current_user)]
OptionalUserDep = Annotated[Optional[UserModel], Depends(get_optional_user)]
GroupRepositoryDep = Annotated[GroupRepositoryInterface, Depends(get_group_repository)]


__all__ = [
    "get_current_user",
    "get_optional_user",
    "get_group_repository",
    "oauth2_scheme",
    "SessionDep",
    "CurrentUserDep",
    "OptionalUserDep",
    "GroupRepositoryDep",
]
