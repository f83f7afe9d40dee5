"""Read-only access to the roles lookup table."""

from sqlalchemy.orm import Session

from app.models import Role


class RoleRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def find_all(self) -> list[Role]:
        return self.session.query(Role).order_by(Role.id).all()

    def find_by_id(self, role_id: int) -> Role | None:
        return self.session.query(Role).filter(Role.id == role_id).first()

    def exists(self, role_id: int) -> bool:
        return self.session.query(Role.id).filter(Role.id == role_id).first() is not None
