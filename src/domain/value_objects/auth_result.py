"""Result and input value objects for the authentication service operations."""

from dataclasses import dataclass, fields
from typing import Dict, Optional

from src.domain.value_objects.public_user import PublicUser


@dataclass(frozen=True)
class AuthResult:
    """Returned by register, login and federated login."""

    token: str
    user: PublicUser


@dataclass(frozen=True)
class Acknowledgement:
    """Returned by the password reset operations."""

    message: str


@dataclass(frozen=True)
class ProfileUpdate:
    """Partial profile changes. Fields left as ``None`` or blank are not touched."""

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    location: Optional[str] = None

    def changes(self) -> Dict[str, str]:
        supplied: Dict[str, str] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, str) and value.strip():
                supplied[f.name] = value
        return supplied
