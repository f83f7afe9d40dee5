"""API routes."""

from typing import Any

from fastapi import APIRouter

from app.api import health, users
from app.schemas.common import ErrorResponse

# Documented error envelopes for the users routes (rendered by app.core.error_handlers).
ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    code: {"model": ErrorResponse, "description": description}
    for code, description in (
        (400, "Validation error or invalid JSON"),
        (401, "Invalid credentials or missing token"),
        (403, "Admin access required"),
        (404, "User not found"),
        (409, "Email already registered"),
        (422, "Request body has fields of the wrong type"),
        (500, "Internal or database error"),
    )
}

api_router = APIRouter()
api_router.include_router(
    users.router, prefix="/users", tags=["users"], responses=ERROR_RESPONSES
)

health_router = APIRouter()
health_router.include_router(health.router, prefix="/health", tags=["health"])
