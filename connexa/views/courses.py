"""Pydantic schemas for Course resources."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class CourseResponse(BaseModel):
    """Serialized representation of a Course."""

    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)
