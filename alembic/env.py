"""Alembic environment: uses app config for DATABASE_URL and Base.metadata for autogenerate."""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine
from sqlalchemy.pool import NullPool

# Migrations run against the same DATABASE_URL the API uses.
from app.core.config import settings
from app.models import Base

# Import all models so that Base.metadata contains every table.
from app.models import Role, User  # noqa: F401

config = context.config
# alembic.ini carries the logging sections fileConfig needs.
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def get_url() -> str:
    """`alembic -x url=...` overrides the DATABASE_URL from application settings."""
    return context.get_x_argument(as_dictionary=True).get("url") or settings.DATABASE_URL


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode (generate SQL only)."""
    context.configure(
        url=get_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode (connect to DB and run)."""
    connectable = create_engine(get_url(), poolclass=NullPool)
    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
