"""The authenticated caller, passed explicitly into every operation."""
from dataclasses import dataclass

from hydromon.models.user import Role, User


@dataclass(frozen=True)
class Principal:
    id: str
    role: Role = Role.USER

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @classmethod
    def from_user(cls, user: User) -> "Principal":
        return cls(id=user.id, role=Role(user.role))
