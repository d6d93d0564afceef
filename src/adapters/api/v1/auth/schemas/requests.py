from __future__ import annotations

"""Request-payload Pydantic models for authentication endpoints.

Required-field and email-format checks are left to `AuthService`, which
reports every missing field at once; the models only fix the payload shape.
"""

from typing import Optional

from pydantic import AliasChoices, BaseModel, Field

# ---------------------------------------------------------------------------
# Concrete request models ----------------------------------------------------
# ---------------------------------------------------------------------------


class RegisterRequest(BaseModel):
    """Payload expected by ``POST /auth/register``."""

    name: Optional[str] = Field(None, examples=["Alice Smith"])
    email: Optional[str] = Field(None, examples=["alice@example.com"])
    password: Optional[str] = Field(None, examples=["Passw0rd!"])
    phone: Optional[str] = Field(None, examples=["9999999999"])
    role: Optional[str] = Field(None, examples=["professional"], description="user or professional")
    location: Optional[str] = Field(None, examples=["Berlin"])


class LoginRequest(BaseModel):
    """Payload expected by ``POST /auth/login``."""

    email: Optional[str] = Field(None, examples=["alice@example.com"])
    password: Optional[str] = Field(None, examples=["Passw0rd!"])


class FederatedLoginRequest(BaseModel):
    """Payload expected by ``POST /auth/google``.

    Accepts the Google Identity Services field name ``credential`` as well.
    """

    assertion: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("assertion", "credential"),
        description="Google ID token",
    )


class ForgotPasswordRequest(BaseModel):
    """Payload expected by ``POST /auth/forgot-password``."""

    email: Optional[str] = Field(
        None,
        examples=["alice@example.com"],
        description="Email address to send the reset code to",
    )


class VerifyResetCodeRequest(BaseModel):
    """Payload expected by ``POST /auth/verify-reset-code``."""

    email: Optional[str] = Field(None, examples=["alice@example.com"])
    code: Optional[str] = Field(None, examples=["042317"], description="Six-digit reset code")


class ResetPasswordRequest(VerifyResetCodeRequest):
    """Payload expected by ``POST /auth/reset-password``."""

    new_password: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("newPassword", "new_password"),
        examples=["N3wPassw0rd!"],
    )


class UpdateProfileRequest(BaseModel):
    """Payload expected by ``PUT /auth/profile``. Omitted fields stay unchanged."""

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    location: Optional[str] = None
