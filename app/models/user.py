"""ORM model for application users."""

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from app.models.base import Base


class User(Base):
    """
    User account. Email is unique and stored lowercased and trimmed.

    Column names passwordHashed and idRol are kept as they exist in the schema.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    password_hashed = Column("passwordHashed", String(255), nullable=False)
    active = Column(Boolean, nullable=False, default=True)
    id_rol = Column("idRol", Integer, ForeignKey("roles.id"), nullable=False)

    role = relationship("Role", lazy="joined")

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r}>"
