"""Course controller exposing the course catalogue."""

from __future__ import annotations

from fastapi import APIRouter
from sqlalchemy import select

from connexa.controllers.dependencies import SessionDep
from connexa.models.course import Course as CourseModel
from connexa.views import CourseResponse, SuccessResponse

router = APIRouter(prefix="/api/users", tags=["courses"])


@router.get("/courses", response_model=SuccessResponse)
async def list_courses(session: SessionDep) -> SuccessResponse:
    result = await session.execute(select(CourseModel).order_by(CourseModel.name))
    courses = [
        CourseResponse.model_validate(course).model_dump()
        for course in result.scalars().all()
    ]
    return SuccessResponse(message="Courses retrieved successfully", data={"courses": courses})
