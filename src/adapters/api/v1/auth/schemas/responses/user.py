from __future__ import annotations

"""Response Pydantic model for user data."""

from typing import Optional

from pydantic import BaseModel

from src.domain.value_objects.public_user import PublicUser


class UserOut(BaseModel):
    """Serialised representation of :class:`~src.domain.value_objects.public_user.PublicUser`."""

    id: str
    name: str
    email: str
    role: str
    phone: Optional[str] = None
    location: Optional[str] = None
    address: Optional[str] = None
    avatar: Optional[str] = None

    @classmethod
    def from_public_user(cls, user: PublicUser) -> "UserOut":
        return cls.model_validate(user)

    model_config = {
        "from_attributes": True
    }
