"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.role import Role
from app.models.user import User

__all__ = ["Base", "Role", "User"]
