"""Unit tests for app.core.errors: tagged AppError and storage error classification."""

import sqlite3
import unittest
from types import SimpleNamespace

from sqlalchemy.exc import DataError, IntegrityError, OperationalError, SQLAlchemyError

from app.core.errors import (
    STATUS_BY_KIND,
    AppError,
    ErrorKind,
    classify_database_error,
    conflict,
    internal_error,
    not_found,
    unprocessable,
    validation_error,
)


class _PgError(Exception):
    """Stand-in for a psycopg2 error: carries pgcode and diag like the real driver."""

    def __init__(self, pgcode: str, detail: str | None = None) -> None:
        super().__init__(f"pg error {pgcode}")
        self.pgcode = pgcode
        self.diag = SimpleNamespace(message_detail=detail, constraint_name="users_email_key")


class TestAppError(unittest.TestCase):
    """Status code and payload come from the kind, not the class."""

    def test_every_kind_has_a_status(self) -> None:
        self.assertEqual(set(STATUS_BY_KIND), set(ErrorKind))
        self.assertEqual(AppError(ErrorKind.CONFLICT, "x").status_code, 409)
        self.assertEqual(AppError(ErrorKind.UNPROCESSABLE, "x").status_code, 422)

    def test_to_dict_omits_missing_fields(self) -> None:
        err = validation_error("Invalid email format", field="email")
        self.assertEqual(err.to_dict(), {"message": "Invalid email format", "field": "email"})

    def test_internal_details_hidden_unless_exposed(self) -> None:
        err = internal_error(details="stack-adjacent text")
        self.assertNotIn("details", err.to_dict(expose_internal=False))
        self.assertEqual(err.to_dict(expose_internal=True)["details"], "stack-adjacent text")

    def test_unprocessable_carries_field_failures(self) -> None:
        failures = [{"field": "idRol", "message": "Input should be a valid integer"}]
        err = unprocessable("Request data could not be processed", failures)
        self.assertEqual(err.status_code, 422)
        self.assertEqual(err.to_dict()["details"], failures)
        self.assertNotIn("details", unprocessable("Nothing listed").to_dict())

    def test_not_found_with_id(self) -> None:
        err = not_found("User", 999)
        self.assertEqual(err.kind, ErrorKind.NOT_FOUND)
        self.assertEqual(err.message, "User not found with ID: 999")
        self.assertEqual(err.to_dict()["details"], "ID: 999")

    def test_conflict_payload(self) -> None:
        err = conflict("User", field="email", value="ana@test.com")
        self.assertEqual(err.status_code, 409)
        self.assertEqual(
            err.to_dict(),
            {
                "message": "User already exists - email: ana@test.com",
                "field": "email",
                "details": "ana@test.com",
            },
        )


class TestClassifyDatabaseError(unittest.TestCase):
    """SQLSTATE codes map to kinds; unknown failures become 500 database errors."""

    def test_unique_violation_is_conflict(self) -> None:
        orig = _PgError("23505", "Key (email)=(ana@test.com) already exists.")
        err = classify_database_error(IntegrityError("INSERT", {}, orig))
        self.assertEqual(err.kind, ErrorKind.CONFLICT)
        self.assertEqual(err.status_code, 409)
        self.assertEqual(err.details, "Key (email)=(ana@test.com) already exists.")

    def test_foreign_key_violation_is_bad_request(self) -> None:
        err = classify_database_error(IntegrityError("INSERT", {}, _PgError("23503")))
        self.assertEqual(err.status_code, 400)
        # Falls back to the constraint name when the driver has no detail.
        self.assertEqual(err.details, "users_email_key")

    def test_not_null_violation_is_bad_request(self) -> None:
        err = classify_database_error(IntegrityError("INSERT", {}, _PgError("23502")))
        self.assertEqual(err.status_code, 400)

    def test_value_too_long_is_bad_request(self) -> None:
        err = classify_database_error(DataError("INSERT", {}, _PgError("22001")))
        self.assertEqual(err.kind, ErrorKind.VALIDATION)

    def test_connection_failure_is_internal(self) -> None:
        err = classify_database_error(OperationalError("SELECT 1", {}, _PgError("08006")))
        self.assertEqual(err.kind, ErrorKind.DATABASE)
        self.assertEqual(err.status_code, 500)
        self.assertNotIn("details", err.to_dict(expose_internal=False))

    def test_unknown_code_is_generic_database_error(self) -> None:
        err = classify_database_error(OperationalError("SELECT 1", {}, _PgError("57014")))
        self.assertEqual(err.kind, ErrorKind.DATABASE)
        self.assertEqual(err.message, "Database error")

    def test_integrity_error_without_code_is_conflict(self) -> None:
        orig = sqlite3.IntegrityError("UNIQUE constraint failed: users.email")
        err = classify_database_error(IntegrityError("INSERT", {}, orig))
        self.assertEqual(err.kind, ErrorKind.CONFLICT)
        self.assertEqual(err.message, "Database constraint violation")

    def test_non_dbapi_error_is_database_error(self) -> None:
        err = classify_database_error(SQLAlchemyError("session closed"))
        self.assertEqual(err.kind, ErrorKind.DATABASE)
        self.assertEqual(err.to_dict(expose_internal=True)["details"], "session closed")


if __name__ == "__main__":
    unittest.main()
