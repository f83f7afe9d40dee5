"""Core app configuration, storage handle and error types."""

from app.core.config import Settings, get_settings, settings
from app.core.database import Database
from app.core.errors import AppError, ErrorKind

__all__ = ["AppError", "Database", "ErrorKind", "Settings", "get_settings", "settings"]
