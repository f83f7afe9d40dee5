"""Data access for users and roles. No business validation lives here."""

from app.repositories.roles import RoleRepository
from app.repositories.users import UserRepository

__all__ = ["RoleRepository", "UserRepository"]
