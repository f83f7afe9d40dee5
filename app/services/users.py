"""User domain service: validation, normalization, password hashing, uniqueness and authentication."""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import TYPE_CHECKING, Any

from app.core.errors import conflict, not_found, unauthorized, validation_error
from app.core.security import (
    DEFAULT_BCRYPT_ROUNDS,
    PASSWORD_MIN_LEN,
    hash_password,
    verify_password,
)
from app.schemas.users import CreateUserRequest, LoginRequest, UpdateUserRequest

if TYPE_CHECKING:
    from app.models import User
    from app.repositories import RoleRepository, UserRepository

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

# Largest value a PostgreSQL INTEGER key column can hold.
MAX_ID = 2**31 - 1

ADMIN_ROLE = "admin"

INVALID_CREDENTIALS = "Invalid credentials"
INACTIVE_ACCOUNT = "User account is inactive"

# Request field names as clients send them.
PUBLIC_FIELD_NAMES = {"id_rol": "idRol"}


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _validate_email(email: str) -> None:
    if not EMAIL_PATTERN.match(email):
        raise validation_error("Invalid email format", field="email")


def _validate_password(password: str) -> None:
    if len(password) < PASSWORD_MIN_LEN:
        raise validation_error(
            f"Password must be at least {PASSWORD_MIN_LEN} characters long",
            field="password",
        )


@lru_cache
def _dummy_hash(rounds: int) -> str:
    return hash_password("not-a-real-password", rounds=rounds)


def _is_valid_id(value: Any) -> bool:
    # bool is an int subclass; True must not pass as id 1.
    return not isinstance(value, bool) and isinstance(value, int) and 0 < value <= MAX_ID


def _validate_id(user_id: Any) -> int:
    if not _is_valid_id(user_id):
        raise validation_error("Invalid user ID", field="id")
    return user_id


class UserService:
    """
    Orchestrates the user and role gateways. Stateless between calls; every
    failure is raised as an AppError.
    """

    def __init__(
        self,
        users: UserRepository,
        roles: RoleRepository,
        bcrypt_rounds: int = DEFAULT_BCRYPT_ROUNDS,
    ) -> None:
        self.users = users
        self.roles = roles
        self.bcrypt_rounds = bcrypt_rounds

    def _hash(self, password: str) -> str:
        return hash_password(password, rounds=self.bcrypt_rounds)

    def _validate_role(self, id_rol: Any) -> int:
        if not _is_valid_id(id_rol):
            raise validation_error("Invalid role ID", field="idRol")
        if not self.roles.exists(id_rol):
            raise validation_error(f"Role {id_rol} does not exist", field="idRol")
        return id_rol

    def grants_admin(self, id_rol: Any) -> bool:
        """True when id_rol names the admin role. Invalid ids are left for validation."""
        if not _is_valid_id(id_rol):
            return False
        role = self.roles.find_by_id(id_rol)
        return role is not None and role.role == ADMIN_ROLE

    def create_user(self, data: CreateUserRequest) -> User:
        if not data.name or not data.email or not data.password:
            raise validation_error("Name, email and password are required")

        name = data.name.strip()
        if not name:
            raise validation_error("Name cannot be empty", field="name")
        email = normalize_email(data.email)
        _validate_email(email)
        _validate_password(data.password)
        if data.id_rol is None:
            raise validation_error("Role ID is required", field="idRol")
        id_rol = self._validate_role(data.id_rol)

        # The unique constraint on users.email still guards concurrent inserts.
        if self.users.exists_by_email(email):
            raise conflict("User", field="email", value=email)

        user = self.users.create(
            {
                "name": name,
                "email": email,
                "password_hashed": self._hash(data.password),
                "active": True if data.active is None else data.active,
                "id_rol": id_rol,
            }
        )
        return user

    def get_all_users(self) -> list[User]:
        return self.users.find_all()

    def get_user_by_id(self, user_id: int) -> User | None:
        return self.users.find_by_id(_validate_id(user_id))

    def get_user_by_email(self, email: str | None) -> User | None:
        if not email or not email.strip():
            raise validation_error("Email is required", field="email")
        return self.users.find_by_email(normalize_email(email))

    def update_user(self, user_id: int, data: UpdateUserRequest) -> User:
        """Partial update: only fields present in the request are validated and changed."""
        user_id = _validate_id(user_id)
        existing = self.users.find_by_id(user_id)
        if existing is None:
            raise not_found("User", user_id)

        provided = data.model_dump(include=data.model_fields_set)
        for field, value in provided.items():
            if value is None:
                public = PUBLIC_FIELD_NAMES.get(field, field)
                raise validation_error(f"{public} cannot be null", field=public)

        changes: dict[str, Any] = {}

        if "name" in provided:
            name = provided["name"].strip()
            if not name:
                raise validation_error("Name cannot be empty", field="name")
            changes["name"] = name

        if "email" in provided:
            email = normalize_email(provided["email"])
            _validate_email(email)
            if email != existing.email and self.users.exists_by_email(email, exclude_id=user_id):
                raise conflict("User", field="email", value=email)
            changes["email"] = email

        if "password" in provided:
            _validate_password(provided["password"])
            changes["password_hashed"] = self._hash(provided["password"])

        if "active" in provided:
            changes["active"] = provided["active"]

        if "id_rol" in provided:
            changes["id_rol"] = self._validate_role(provided["id_rol"])

        if not changes:
            return existing

        updated = self.users.update(user_id, changes)
        if updated is None:
            # Removed by another request between the lookup and the write.
            raise not_found("User", user_id)
        logger.info("Updated user id=%s fields=%s", user_id, sorted(changes))
        return updated

    def delete_user(self, user_id: int) -> bool:
        user_id = _validate_id(user_id)
        if self.users.find_by_id(user_id) is None:
            raise not_found("User", user_id)
        deleted = self.users.delete(user_id)
        if deleted:
            logger.info("Deleted user id=%s", user_id)
        return deleted

    def authenticate_user(self, data: LoginRequest) -> User:
        if not data.email or not data.password:
            raise validation_error("Email and password are required")

        user = self.users.find_by_email(normalize_email(data.email))
        if user is None:
            # Same bcrypt cost as a real check so a missing account is not observable by timing.
            verify_password(data.password, _dummy_hash(self.bcrypt_rounds))
            raise unauthorized(INVALID_CREDENTIALS)

        if not verify_password(data.password, user.password_hashed):
            raise unauthorized(INVALID_CREDENTIALS)

        if not user.active:
            raise unauthorized(INACTIVE_ACCOUNT)

        return user
