"""Request/response schemas for the users endpoints.

Request fields are optional at the schema level: missing or empty values are
reported by the user service as validation errors (400) rather than by FastAPI.
"""

from pydantic import BaseModel, ConfigDict, Field


class CreateUserRequest(BaseModel):
    """Body for POST /users."""

    model_config = ConfigDict(populate_by_name=True)

    name: str | None = Field(default=None, description="Display name")
    email: str | None = Field(default=None, description="Email (login identifier)")
    password: str | None = Field(default=None, description="Plain password, min 6 chars")
    active: bool | None = Field(default=None, description="Defaults to true")
    id_rol: int | None = Field(default=None, alias="idRol", description="Role id")


class UpdateUserRequest(BaseModel):
    """Body for PUT /users/{id}. Only fields present in the body are changed."""

    model_config = ConfigDict(populate_by_name=True)

    name: str | None = None
    email: str | None = None
    password: str | None = None
    active: bool | None = None
    id_rol: int | None = Field(default=None, alias="idRol")


class LoginRequest(BaseModel):
    """Credentials for POST /users/login."""

    email: str | None = None
    password: str | None = None


class UserOut(BaseModel):
    """Public view of a user. Never carries the password hash."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    name: str
    email: str
    active: bool
    id_rol: int = Field(alias="idRol")


class TokenResponse(BaseModel):
    """JWT access token returned after successful login."""

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
