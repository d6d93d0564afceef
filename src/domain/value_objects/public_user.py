"""Outward projection of a User.

Everything that leaves the authentication service describes a user through
`PublicUser`, which by construction has no password digest or reset fields.
"""

from dataclasses import dataclass
from typing import Optional

from src.domain.entities.user import User


@dataclass(frozen=True)
class PublicUser:
    id: str
    name: str
    email: str
    role: str
    phone: Optional[str] = None
    location: Optional[str] = None
    address: Optional[str] = None
    avatar: Optional[str] = None

    @classmethod
    def from_entity(cls, user: User) -> "PublicUser":
        role = user.role.value if hasattr(user.role, "value") else str(user.role)
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            role=role,
            phone=user.phone,
            location=user.location,
            address=user.address,
            avatar=user.avatar,
        )
