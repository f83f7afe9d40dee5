"""ORM model for the roles lookup table."""

from sqlalchemy import Column, Integer, String

from app.models.base import Base

ROLE_NAME_MAX_LEN = 25


class Role(Base):
    """
    Static reference data, seeded by the initial migration.

    Conventional rows: 'admin' and 'user'.
    """

    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    role = Column(String(ROLE_NAME_MAX_LEN), nullable=False)
