"""SQLAlchemy declarative Base shared by the users and roles models."""

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

# Same names PostgreSQL gives unnamed constraints, so autogenerate does not see drift.
NAMING_CONVENTION = {
    "pk": "%(table_name)s_pkey",
    "uq": "%(table_name)s_%(column_0_name)s_key",
    "fk": "%(table_name)s_%(column_0_name)s_fkey",
}


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)
