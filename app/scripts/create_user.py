"""
Create a user (e.g. the first admin when AUTH_ENABLED is on). Run from project root:
  python -m app.scripts.create_user NAME EMAIL PASSWORD [role]
Example:
  python -m app.scripts.create_user "Ana Admin" ana@example.com your-secure-password admin
"""
import argparse
import logging
import sys

from app.core.config import get_settings
from app.core.database import Database
from app.core.errors import AppError
from app.core.logging import configure_logging
from app.repositories import RoleRepository, UserRepository
from app.schemas.users import CreateUserRequest
from app.services.users import UserService

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a user (no registration UI needed).")
    parser.add_argument("name", help="Display name")
    parser.add_argument("email", help="Email address (login identifier)")
    parser.add_argument("password", help="Password (at least 6 chars)")
    parser.add_argument("role", nargs="?", default="user", help="Role name (default: user)")
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    database = Database(settings.DATABASE_URL)
    db = database.session()
    try:
        role = next((r for r in RoleRepository(db).find_all() if r.role == args.role), None)
        if role is None:
            print(f"Role '{args.role}' does not exist.", file=sys.stderr)
            return 1
        service = UserService(
            UserRepository(db), RoleRepository(db), bcrypt_rounds=settings.BCRYPT_ROUNDS
        )
        try:
            user = service.create_user(
                CreateUserRequest(
                    name=args.name,
                    email=args.email,
                    password=args.password,
                    id_rol=role.id,
                )
            )
        except AppError as e:
            print(e.message, file=sys.stderr)
            return 1
        print(f"Created user '{user.email}' (id={user.id}) with role '{role.role}'.")
        return 0
    finally:
        db.close()
        database.dispose()


if __name__ == "__main__":
    sys.exit(main())
