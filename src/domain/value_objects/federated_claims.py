"""Federated identity claims value object.

Holds the subset of an identity provider's claims the marketplace relies on,
and only after the assertion carrying them has been cryptographically verified.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from src.domain.value_objects.email import Email


@dataclass(frozen=True)
class FederatedClaims:
    """Verified claims from a third-party identity assertion.

    Attributes:
        email: Normalized, provider-verified email address.
        name: Display name, when the provider supplies one.
        picture: Avatar URL, when the provider supplies one.
    """

    email: str
    name: Optional[str] = None
    picture: Optional[str] = None

    @classmethod
    def from_verified_payload(cls, payload: Mapping[str, Any]) -> "FederatedClaims":
        """Builds claims from an already verified token payload.

        Raises:
            ValueError: If the payload has no usable email, or the provider
                states the email is not verified.
        """
        raw_email = payload.get("email")
        if not raw_email or not isinstance(raw_email, str):
            raise ValueError("Assertion carries no email claim")
        if payload.get("email_verified") in (False, "false"):
            raise ValueError("Assertion email is not verified by the provider")

        email = Email(raw_email)
        name = payload.get("name") or None
        picture = payload.get("picture") or None
        return cls(email=email.value, name=name, picture=picture)

    @property
    def display_name(self) -> str:
        """The provider's name, falling back to the email local part."""
        return self.name or self.email.split("@")[0]
