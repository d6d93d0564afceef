"""Domain Value Objects for the authentication domain.

Value objects are immutable objects that describe domain concepts by their attributes
rather than their identity.
"""

from .auth_result import Acknowledgement, AuthResult, ProfileUpdate
from .email import Email, mask_email
from .federated_claims import FederatedClaims
from .public_user import PublicUser
from .session_token import TokenClaims, TokenId

__all__ = [
    "Acknowledgement",
    "AuthResult",
    "Email",
    "FederatedClaims",
    "ProfileUpdate",
    "PublicUser",
    "TokenClaims",
    "TokenId",
    "mask_email",
]
