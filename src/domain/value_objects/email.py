"""A Value Object representing an email address in the domain.

Email is the primary lookup key for every credential operation, so every
address entering the domain is normalized the same way: trimmed and lower-cased.
"""

import re
from dataclasses import dataclass
from typing import ClassVar

from structlog import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Email:
    """An immutable, self-validating email address.

    Business rules enforced on construction:
    - Conforms to a standard email shape.
    - Has a reasonable length.
    - Is normalized to lowercase without surrounding whitespace.

    Attributes:
        value: The normalized string representation of the email address.
    """

    value: str

    MAX_LENGTH: ClassVar[int] = 254
    MIN_LENGTH: ClassVar[int] = 3
    EMAIL_PATTERN: ClassVar[re.Pattern] = re.compile(
        r"^[a-zA-Z0-9._%+'-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
    )

    def __post_init__(self):
        if not isinstance(self.value, str):
            raise TypeError("Email value must be a string.")

        normalized_value = self.normalize(self.value)
        object.__setattr__(self, "value", normalized_value)

        if not (self.MIN_LENGTH <= len(normalized_value) <= self.MAX_LENGTH):
            raise ValueError(
                f"Email length must be between {self.MIN_LENGTH} and {self.MAX_LENGTH} characters."
            )
        if not self.EMAIL_PATTERN.match(normalized_value):
            raise ValueError("Invalid email format.")

    @staticmethod
    def normalize(raw: str) -> str:
        """Normalizes a raw address for lookups without validating it."""
        return raw.strip().lower()

    @property
    def local_part(self) -> str:
        """Returns the local part of the email address (before the '@')."""
        return self.value.split("@")[0]

    def mask_for_logging(self) -> str:
        """Returns a masked version of the email for safe logging.

        Example: 'al***@e*****.com'
        """
        return mask_email(self.value)

    def __str__(self) -> str:
        return self.value


def mask_email(email: str) -> str:
    """Masks an arbitrary, possibly malformed address for log output."""
    if not email:
        return "[empty]"
    if "@" not in email:
        return f"{email[:2]}***"
    local, domain_part = email.rsplit("@", 1)
    masked_local = f"{local[:2]}{'*' * max(len(local) - 2, 0)}"
    masked_domain = f"{domain_part[:1]}{'*' * max(len(domain_part) - 2, 0)}{domain_part[-1:]}"
    return f"{masked_local}@{masked_domain}"
