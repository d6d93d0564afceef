"""Password hashing service.

Wraps a passlib `CryptContext` configured for bcrypt with a configurable work
factor. Verification never raises: a missing or malformed digest is reported
as a mismatch, after a comparison against a dummy digest so that the time
taken does not reveal which case occurred.
"""

import secrets
from typing import Optional

from passlib.context import CryptContext
from structlog import get_logger

logger = get_logger(__name__)


class PasswordHasher:
    """One-way salted hashing and constant-time verification of passwords.

    Attributes:
        pwd_context (CryptContext): The passlib context used for bcrypt.
    """

    def __init__(self, work_factor: int = 12):
        self.pwd_context = CryptContext(
            schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=work_factor
        )
        # A real digest of a random secret; compared against whenever there is
        # nothing genuine to compare with.
        self._dummy_digest = self.pwd_context.hash(secrets.token_urlsafe(16))

    def hash(self, plaintext: str) -> str:
        """Hash a password with a fresh salt.

        Args:
            plaintext: Plain text password to hash

        Returns:
            str: Bcrypt digest embedding salt and work factor
        """
        return self.pwd_context.hash(plaintext)

    def verify(self, plaintext: str, digest: Optional[str]) -> bool:
        """Verify a password against its digest.

        Args:
            plaintext: Plain text password to verify
            digest: Stored digest, or ``None`` when the account has no usable
                password

        Returns:
            bool: True only if the password matches a well-formed digest
        """
        secret = plaintext if isinstance(plaintext, str) else ""
        if not digest or self.pwd_context.identify(digest) is None:
            self.pwd_context.verify(secret, self._dummy_digest)
            return False
        try:
            return self.pwd_context.verify(secret, digest)
        except (ValueError, TypeError):
            logger.warning("Malformed password digest encountered")
            self.pwd_context.verify(secret, self._dummy_digest)
            return False
