"""Common response schemas."""

from typing import Any, Optional

from pydantic import BaseModel


class ErrorDetail(BaseModel):
    field: str
    message: str
    value: Any = None


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    error: Optional[str] = None
    errors: Optional[list[ErrorDetail]] = None


class SuccessResponse(BaseModel):
    success: bool = True
    message: str
    data: Optional[dict] = None
