"""Domain Services for the Authentication Bounded Context.

Authentication Domain Services:
- AuthService: registration, login, federated login, password reset and
  profile updates
- PasswordHasher, TokenIssuer, ResetCodeManager: credential primitives
- FederatedIdentityVerifier: third-party identity assertion checks
"""

from .auth import (
    AuthService,
    FederatedIdentityVerifier,
    PasswordHasher,
    ResetCodeManager,
    TokenIssuer,
)

__all__ = [
    "AuthService",
    "FederatedIdentityVerifier",
    "PasswordHasher",
    "ResetCodeManager",
    "TokenIssuer",
]
