"""Session token value objects.

These value objects describe what a verified session token proves: who the
subject is and the window in which the proof holds.
"""

import base64
import secrets
from dataclasses import dataclass
from datetime import datetime
from typing import ClassVar


@dataclass(frozen=True)
class TokenId:
    """Value object for the JWT identifier (``jti`` claim).

    256 bits of entropy encoded as 43 URL-safe base64 characters.
    """

    value: str

    TOKEN_ID_LENGTH: ClassVar[int] = 43

    def __post_init__(self):
        if len(self.value) != self.TOKEN_ID_LENGTH:
            raise ValueError(f"Token ID must be exactly {self.TOKEN_ID_LENGTH} characters")

    @classmethod
    def generate(cls) -> "TokenId":
        raw_bytes = secrets.token_bytes(32)
        return cls(base64.urlsafe_b64encode(raw_bytes).rstrip(b"=").decode("ascii"))

    def mask_for_logging(self) -> str:
        return self.value[:4] + "*" * (len(self.value) - 4)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class TokenClaims:
    """Claims extracted from a session token whose signature and expiry were verified.

    Attributes:
        subject: The user id the token was issued to.
        issued_at: When the token was issued (UTC).
        expires_at: When the token stops being valid (UTC).
        token_id: The token's unique ``jti``.
    """

    subject: str
    issued_at: datetime
    expires_at: datetime
    token_id: str
