"""Response envelopes shared by every endpoint."""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope: {success, message, data?, count?}."""

    success: bool = True
    message: str
    data: T | None = None
    count: int | None = None


class ErrorBody(BaseModel):
    message: str
    field: str | None = None
    details: Any | None = None


class ErrorResponse(BaseModel):
    """Error envelope: {success: false, error, timestamp, path}."""

    success: bool = Field(default=False)
    error: ErrorBody
    timestamp: str
    path: str
