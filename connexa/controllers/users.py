"""User controller implementing registration and profile endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from connexa.controllers.dependencies import CurrentUserDep, SessionDep
from connexa.models.course import Course as CourseModel
from connexa.models.user import User as UserModel
from connexa.utils import hash_password
from connexa.views import SuccessResponse, UserRegistrationRequest, UserResponse

router = APIRouter(prefix="/api/users", tags=["users"])


@router.post(
    "/register", response_model=SuccessResponse, status_code=status.HTTP_201_CREATED
)
async def register_user(
    payload: UserRegistrationRequest,
    session: SessionDep,
) -> SuccessResponse:
    result = await session.execute(
        select(UserModel.id).where(
            UserModel.institutional_email == payload.institutional_email
        )
    )
    if result.scalar_one_or_none() is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="This institutional email is already registered",
        )

    course = await session.get(CourseModel, payload.course_id)
    if course is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Course not found",
        )

    db_user = UserModel(
        full_name=payload.full_name,
        institutional_email=payload.institutional_email,
        password_hash=hash_password(payload.password),
        course=course,
        current_semester=payload.current_semester,
    )
    session.add(db_user)
    try:
        await session.commit()
    except IntegrityError as exc:
        # Lost a race with a concurrent registration of the same email.
        await session.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="This institutional email is already registered",
        ) from exc

    await session.refresh(db_user)
    return SuccessResponse(
        message="User registered successfully",
        data={"user": UserResponse.model_validate(db_user).model_dump()},
    )


@router.get("/profile", response_model=SuccessResponse)
async def get_current_user_profile(
    current_user: CurrentUserDep,
) -> SuccessResponse:
    return SuccessResponse(
        message="Profile retrieved successfully",
        data={"user": UserResponse.model_validate(current_user).model_dump()},
    )
