from __future__ import annotations

"""Authentication API schemas package.

Request models, response models and the generic message response live in
separate modules and are re-exported here.
"""

# flake8: noqa: F401 – re-export

from .misc import MessageResponse
from .requests import (
    FederatedLoginRequest,
    ForgotPasswordRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    UpdateProfileRequest,
    VerifyResetCodeRequest,
)
from .responses.auth import AuthResponse, ProfileResponse
from .responses.user import UserOut

__all__ = [
    "RegisterRequest",
    "LoginRequest",
    "FederatedLoginRequest",
    "ForgotPasswordRequest",
    "VerifyResetCodeRequest",
    "ResetPasswordRequest",
    "UpdateProfileRequest",
    "UserOut",
    "AuthResponse",
    "ProfileResponse",
    "MessageResponse",
]
