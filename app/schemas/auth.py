"""Schemas for the authenticated caller and the login response."""

from pydantic import BaseModel

from app.schemas.common import ApiResponse
from app.schemas.users import TokenResponse, UserOut


class CurrentUser(BaseModel):
    """Authenticated user (id, email, role) for dependency injection."""

    id: int
    email: str
    role: str


class LoginResponse(ApiResponse[UserOut]):
    """Login envelope: the user plus an access token."""

    token: TokenResponse
