"""Pydantic request/response schemas."""

from app.schemas.auth import CurrentUser, LoginResponse
from app.schemas.common import ApiResponse, ErrorBody, ErrorResponse
from app.schemas.health import HealthResponse
from app.schemas.users import (
    CreateUserRequest,
    LoginRequest,
    TokenResponse,
    UpdateUserRequest,
    UserOut,
)

__all__ = [
    "ApiResponse",
    "CreateUserRequest",
    "CurrentUser",
    "ErrorBody",
    "ErrorResponse",
    "HealthResponse",
    "LoginRequest",
    "LoginResponse",
    "TokenResponse",
    "UpdateUserRequest",
    "UserOut",
]
