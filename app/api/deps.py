"""FastAPI dependencies: DB session, user service, and the authenticated caller."""

import logging
from collections.abc import Generator
from typing import Annotated

import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.config import Settings
from app.core.errors import forbidden, unauthorized
from app.core.security import decode_access_token
from app.repositories import RoleRepository, UserRepository
from app.schemas.auth import CurrentUser
from app.services.users import ADMIN_ROLE, MAX_ID, UserService

logger = logging.getLogger(__name__)
security = HTTPBearer(auto_error=False)

# Identity used for every request when AUTH_ENABLED is False.
ANONYMOUS_ADMIN = CurrentUser(id=0, email="anonymous@localhost", role=ADMIN_ROLE)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_db(request: Request) -> Generator[Session, None, None]:
    """Dependency that yields a DB session from the app's Database and closes it when done."""
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()


def get_user_service(
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> UserService:
    return UserService(
        UserRepository(db),
        RoleRepository(db),
        bcrypt_rounds=settings.BCRYPT_ROUNDS,
    )


def _user_from_token(token: str, settings: Settings, db: Session) -> CurrentUser:
    try:
        payload = decode_access_token(token, settings)
    except jwt.PyJWTError:
        raise unauthorized("Invalid or expired token") from None
    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise unauthorized("Invalid token payload") from None
    if not 0 < user_id <= MAX_ID:
        raise unauthorized("Invalid token payload")

    user = UserRepository(db).find_by_id(user_id)
    if user is None or not user.active:
        raise unauthorized("User not found or inactive")
    return CurrentUser(id=user.id, email=user.email, role=user.role.role)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    settings: Annotated[Settings, Depends(get_app_settings)],
    db: Annotated[Session, Depends(get_db)],
) -> CurrentUser:
    """Require a valid Bearer JWT when auth is enabled; otherwise return the anonymous admin."""
    if not settings.AUTH_ENABLED:
        return ANONYMOUS_ADMIN
    if credentials is None:
        raise unauthorized("Not authenticated")
    return _user_from_token(credentials.credentials, settings, db)


def get_optional_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    settings: Annotated[Settings, Depends(get_app_settings)],
    db: Annotated[Session, Depends(get_db)],
) -> CurrentUser | None:
    """Like get_current_user, but a request without a token yields None instead of 401."""
    if not settings.AUTH_ENABLED:
        return ANONYMOUS_ADMIN
    if credentials is None:
        return None
    return _user_from_token(credentials.credentials, settings, db)


def is_admin(user: CurrentUser | None) -> bool:
    return user is not None and user.role == ADMIN_ROLE


def require_admin(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Require the 'admin' role. Raises 403 for anyone else."""
    if not is_admin(current_user):
        logger.warning("Admin access denied for user id=%s", current_user.id)
        raise forbidden("Admin access required")
    return current_user
