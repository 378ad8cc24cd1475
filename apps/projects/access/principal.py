from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Principal:
    """The authenticated identity an access decision is made for."""

    id: int
    role: str

    @classmethod
    def from_user(cls, user) -> Optional["Principal"]:
        if user is None or not user.is_authenticated:
            return None
        return cls(id=user.pk, role=user.role)
