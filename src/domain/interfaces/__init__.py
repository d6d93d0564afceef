"""Domain Interfaces for dependency inversion.

These interfaces define the ports that infrastructure adapters implement:
- Repository: credential persistence
- Services: reset-code delivery and federated identity verification
"""

from .repositories import ICredentialStore
from .services import IFederatedIdentityVerifier, INotificationSender

__all__ = [
    "ICredentialStore",
    "IFederatedIdentityVerifier",
    "INotificationSender",
]
