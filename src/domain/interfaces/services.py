"""Service interfaces for collaborators the authentication domain depends on."""

from abc import ABC, abstractmethod

from src.domain.value_objects.federated_claims import FederatedClaims


class INotificationSender(ABC):
    """Interface for delivering password reset codes to users."""

    @abstractmethod
    async def send_reset_code(self, email: str, code: str) -> None:
        """Deliver ``code`` to ``email``.

        Raises:
            NotificationError: If the code could not be dispatched.
        """
        raise NotImplementedError


class IFederatedIdentityVerifier(ABC):
    """Interface for validating third-party identity assertions."""

    @abstractmethod
    async def verify(self, assertion: str) -> FederatedClaims:
        """Verify ``assertion`` and return its claims.

        Raises:
            FederatedIdentityError: If the assertion is not valid.
            IdentityProviderUnavailableError: If the provider's keys cannot be fetched.
        """
        raise NotImplementedError

    async def close(self) -> None:
        """Release any network resources held by the verifier."""
        return None
