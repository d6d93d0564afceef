from .auth_service import AuthService
from .federated_identity import FederatedIdentityVerifier
from .password_hasher import PasswordHasher
from .reset_code import ResetCodeManager
from .token import TokenIssuer

__all__ = [
    "AuthService",
    "FederatedIdentityVerifier",
    "PasswordHasher",
    "ResetCodeManager",
    "TokenIssuer",
]
