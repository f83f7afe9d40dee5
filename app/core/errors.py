"""Tagged application errors and storage error classification.

Every failure the API reports is an AppError: a kind from a closed set, a
message, and optional field/details. HTTP status is looked up from the kind.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from sqlalchemy.exc import DBAPIError, IntegrityError, SQLAlchemyError


class ErrorKind(str, Enum):
    """Closed set of error kinds surfaced by the API."""

    VALIDATION = "validation"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    UNPROCESSABLE = "unprocessable"
    RATE_LIMIT = "rate_limit"
    DATABASE = "database"
    INTERNAL = "internal"


STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.UNPROCESSABLE: 422,
    ErrorKind.RATE_LIMIT: 429,
    ErrorKind.DATABASE: 500,
    ErrorKind.INTERNAL: 500,
}

# Kinds whose details describe server internals; hidden outside dev.
INTERNAL_KINDS = frozenset({ErrorKind.DATABASE, ErrorKind.INTERNAL})


class AppError(Exception):
    """Raised by services and the error translator; rendered as the error envelope."""

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        field: str | None = None,
        details: Any = None,
    ) -> None:
        self.kind = kind
        self.message = message
        self.field = field
        self.details = details
        super().__init__(message)

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND[self.kind]

    def to_dict(self, expose_internal: bool = False) -> dict[str, Any]:
        """Serialize to {message, field?, details?}; keys with no value are omitted."""
        body: dict[str, Any] = {"message": self.message}
        if self.field is not None:
            body["field"] = self.field
        details = self.details
        if self.kind in INTERNAL_KINDS and not expose_internal:
            details = None
        if details is not None:
            body["details"] = details
        return body

    def __repr__(self) -> str:
        return f"AppError(kind={self.kind.value!r}, message={self.message!r}, field={self.field!r})"


def validation_error(message: str, field: str | None = None) -> AppError:
    return AppError(ErrorKind.VALIDATION, message, field=field)


def unauthorized(message: str = "Unauthorized") -> AppError:
    return AppError(ErrorKind.UNAUTHORIZED, message)


def forbidden(message: str = "Forbidden") -> AppError:
    return AppError(ErrorKind.FORBIDDEN, message)


def not_found(resource: str = "Resource", resource_id: str | int | None = None) -> AppError:
    message = f"{resource} not found"
    details = None
    if resource_id is not None:
        message += f" with ID: {resource_id}"
        details = f"ID: {resource_id}"
    return AppError(ErrorKind.NOT_FOUND, message, details=details)


def conflict(resource: str, field: str | None = None, value: str | None = None) -> AppError:
    message = f"{resource} already exists"
    if field and value:
        message += f" - {field}: {value}"
    return AppError(ErrorKind.CONFLICT, message, field=field, details=value)


def unprocessable(message: str, errors: list[dict[str, Any]] | None = None) -> AppError:
    """Batch of field failures; each entry is {field, message}."""
    return AppError(ErrorKind.UNPROCESSABLE, message, details=errors or None)


def internal_error(message: str = "Internal server error", details: str | None = None) -> AppError:
    return AppError(ErrorKind.INTERNAL, message, details=details)


# SQLSTATE codes from PostgreSQL mapped to (kind, client message).
DATABASE_ERROR_CODES: dict[str, tuple[ErrorKind, str]] = {
    "23505": (ErrorKind.CONFLICT, "A record with those unique values already exists"),
    "23503": (ErrorKind.VALIDATION, "Reference to a record that does not exist"),
    "23502": (ErrorKind.VALIDATION, "Required field is missing"),
    "22001": (ErrorKind.VALIDATION, "Value too long for field"),
    "08006": (ErrorKind.DATABASE, "Database connection error"),
}


def _sqlstate(orig: Any) -> str | None:
    # psycopg2 exposes pgcode; psycopg 3 exposes sqlstate.
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    return str(code) if code else None


def _constraint_detail(orig: Any) -> str | None:
    diag = getattr(orig, "diag", None)
    if diag is None:
        return None
    return getattr(diag, "message_detail", None) or getattr(diag, "constraint_name", None)


def classify_database_error(exc: SQLAlchemyError) -> AppError:
    """
    Map a storage-layer failure to a tagged AppError.

    Known SQLSTATE codes map to their kind; an integrity error without a code
    (e.g. from SQLite) is still a constraint violation (409). Anything else is
    a 500 whose details are only shown in dev.
    """
    orig = exc.orig if isinstance(exc, DBAPIError) else None
    code = _sqlstate(orig) if orig is not None else None

    if code in DATABASE_ERROR_CODES:
        kind, message = DATABASE_ERROR_CODES[code]
        details = _constraint_detail(orig)
        if kind in INTERNAL_KINDS:
            details = str(orig)
        return AppError(kind, message, details=details)

    if code is None and isinstance(exc, IntegrityError):
        return AppError(ErrorKind.CONFLICT, "Database constraint violation")

    return AppError(ErrorKind.DATABASE, "Database error", details=str(orig or exc))
