from __future__ import annotations

"""Response models for authentication endpoints."""

from pydantic import BaseModel, Field

from src.domain.value_objects.auth_result import AuthResult

from .user import UserOut


class AuthResponse(BaseModel):
    """Returned by registration and both login flows."""

    token: str = Field(..., description="Bearer session token")
    user: UserOut

    @classmethod
    def from_result(cls, result: AuthResult) -> "AuthResponse":
        return cls(token=result.token, user=UserOut.from_public_user(result.user))


class ProfileResponse(BaseModel):
    """Returned by ``PUT /auth/profile``."""

    user: UserOut
