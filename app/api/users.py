"""Users CRUD and login endpoints. Responses never include the password hash."""

import re
from typing import Annotated

from fastapi import APIRouter, Depends, status

from app.api.deps import (
    get_app_settings,
    get_current_user,
    get_optional_user,
    get_user_service,
    is_admin,
    require_admin,
)
from app.core.config import Settings
from app.core.errors import forbidden, not_found, validation_error
from app.core.security import create_access_token
from app.schemas.auth import CurrentUser, LoginResponse
from app.schemas.common import ApiResponse
from app.schemas.users import (
    CreateUserRequest,
    LoginRequest,
    TokenResponse,
    UpdateUserRequest,
    UserOut,
)
from app.services.users import UserService

router = APIRouter()

Service = Annotated[UserService, Depends(get_user_service)]

USER_ID_PATTERN = re.compile(r"[0-9]+")

# Fields only an admin may change, even on their own account.
ADMIN_ONLY_FIELDS = frozenset({"id_rol", "active"})


def _parse_user_id(raw: str) -> int:
    # ASCII digits only: int() would also take "1_0", " 7 " and other scripts' digits.
    if not USER_ID_PATTERN.fullmatch(raw):
        raise validation_error("Invalid user ID", field="id")
    return int(raw)


@router.post(
    "",
    response_model=ApiResponse[UserOut],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
def create_user(
    service: Service,
    caller: Annotated[CurrentUser | None, Depends(get_optional_user)],
    body: CreateUserRequest | None = None,
) -> ApiResponse[UserOut]:
    """Create a user. Email is normalized and must be unique; the password is stored hashed."""
    body = body or CreateUserRequest()
    if not is_admin(caller) and service.grants_admin(body.id_rol):
        raise forbidden("Admin access required to assign the admin role")
    user = service.create_user(body)
    return ApiResponse[UserOut](
        message="User created successfully",
        data=UserOut.model_validate(user),
    )


@router.post("/login", response_model=LoginResponse, response_model_exclude_none=True)
def login(
    service: Service,
    settings: Annotated[Settings, Depends(get_app_settings)],
    body: LoginRequest | None = None,
) -> LoginResponse:
    """
    Authenticate with email and password; returns the user and a JWT access token.
    Include the token in the Authorization header as: Bearer <access_token>
    """
    user = service.authenticate_user(body or LoginRequest())
    token = create_access_token(sub=user.id, role=user.role.role, settings=settings)
    return LoginResponse(
        message="Authentication successful",
        data=UserOut.model_validate(user),
        token=TokenResponse(access_token=token),
    )


@router.get("", response_model=ApiResponse[list[UserOut]], response_model_exclude_none=True)
def list_users(
    service: Service,
    _user: Annotated[CurrentUser, Depends(get_current_user)],
) -> ApiResponse[list[UserOut]]:
    users = [UserOut.model_validate(u) for u in service.get_all_users()]
    return ApiResponse[list[UserOut]](
        message="Users retrieved successfully",
        data=users,
        count=len(users),
    )


@router.get(
    "/email/{email}", response_model=ApiResponse[UserOut], response_model_exclude_none=True
)
def get_user_by_email(
    email: str,
    service: Service,
    _user: Annotated[CurrentUser, Depends(get_current_user)],
) -> ApiResponse[UserOut]:
    user = service.get_user_by_email(email)
    if user is None:
        raise not_found("User")
    return ApiResponse[UserOut](
        message="User retrieved successfully",
        data=UserOut.model_validate(user),
    )


@router.get("/{user_id}", response_model=ApiResponse[UserOut], response_model_exclude_none=True)
def get_user(
    user_id: str,
    service: Service,
    _user: Annotated[CurrentUser, Depends(get_current_user)],
) -> ApiResponse[UserOut]:
    parsed_id = _parse_user_id(user_id)
    user = service.get_user_by_id(parsed_id)
    if user is None:
        raise not_found("User", parsed_id)
    return ApiResponse[UserOut](
        message="User retrieved successfully",
        data=UserOut.model_validate(user),
    )


@router.put("/{user_id}", response_model=ApiResponse[UserOut], response_model_exclude_none=True)
def update_user(
    user_id: str,
    service: Service,
    caller: Annotated[CurrentUser, Depends(get_current_user)],
    body: UpdateUserRequest | None = None,
) -> ApiResponse[UserOut]:
    """
    Partial update: fields omitted from the body keep their current values.
    Non-admins may only edit their own name, email and password.
    """
    parsed_id = _parse_user_id(user_id)
    body = body or UpdateUserRequest()
    if not is_admin(caller):
        if caller.id != parsed_id or body.model_fields_set & ADMIN_ONLY_FIELDS:
            raise forbidden("Admin access required")
    user = service.update_user(parsed_id, body)
    return ApiResponse[UserOut](
        message="User updated successfully",
        data=UserOut.model_validate(user),
    )


@router.delete("/{user_id}", response_model=ApiResponse[None], response_model_exclude_none=True)
def delete_user(
    user_id: str,
    service: Service,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
) -> ApiResponse[None]:
    parsed_id = _parse_user_id(user_id)
    if not service.delete_user(parsed_id):
        raise not_found("User", parsed_id)
    return ApiResponse[None](message="User deleted successfully")
