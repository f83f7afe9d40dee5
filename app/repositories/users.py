"""Persistence gateway for the users table."""

import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models import User

logger = logging.getLogger(__name__)

# Attributes update() is allowed to set.
UPDATABLE_FIELDS = frozenset({"name", "email", "password_hashed", "active", "id_rol"})


class UserRepository:
    """
    Translates between User rows and the session. Storage failures propagate
    unchanged; a failed commit is rolled back first so the session stays usable.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def _commit(self) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise

    def create(self, values: dict[str, Any]) -> User:
        user = User(**values)
        self.session.add(user)
        self._commit()
        self.session.refresh(user)
        logger.info("Created user id=%s", user.id)
        return user

    def find_all(self) -> list[User]:
        return self.session.query(User).order_by(User.id).all()

    def find_by_id(self, user_id: int) -> User | None:
        return self.session.query(User).filter(User.id == user_id).first()

    def find_by_email(self, email: str) -> User | None:
        return self.session.query(User).filter(User.email == email).first()

    def update(self, user_id: int, changes: dict[str, Any]) -> User | None:
        """Apply only the given fields; returns None if the row does not exist."""
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update fields: {', '.join(sorted(unknown))}")
        user = self.find_by_id(user_id)
        if user is None:
            return None
        for field, value in changes.items():
            setattr(user, field, value)
        self._commit()
        self.session.refresh(user)
        return user

    def delete(self, user_id: int) -> bool:
        deleted = (
            self.session.query(User)
            .filter(User.id == user_id)
            .delete(synchronize_session=False)
        )
        self._commit()
        return deleted > 0

    def exists_by_email(self, email: str, exclude_id: int | None = None) -> bool:
        query = self.session.query(User.id).filter(User.email == email)
        if exclude_id is not None:
            query = query.filter(User.id != exclude_id)
        return query.first() is not None
