"""Password reset code generation and validation.

Reset codes are short numeric secrets mailed to the account owner. They are
unique per user record only; the expiry window and single use are what keep
them safe.
"""

import hmac
import secrets
from datetime import datetime, timedelta, timezone
from typing import ClassVar, Optional


class ResetCodeManager:
    """Generates and validates six-digit, time-limited recovery codes.

    Attributes:
        ttl (timedelta): How long a freshly generated code stays valid.
    """

    CODE_LENGTH: ClassVar[int] = 6

    def __init__(self, ttl: timedelta = timedelta(hours=1)):
        self.ttl = ttl

    def generate(self) -> str:
        """Return a uniformly random, zero-padded code in [000000, 999999]."""
        return f"{secrets.randbelow(10 ** self.CODE_LENGTH):0{self.CODE_LENGTH}d}"

    def compute_expiry(self, now: datetime) -> datetime:
        """Return the expiry for a code generated at ``now``."""
        return now + self.ttl

    def validate(
        self,
        stored_code: Optional[str],
        stored_expiry: Optional[datetime],
        supplied_code: Optional[str],
        now: datetime,
    ) -> bool:
        """Check a supplied code against the stored pair.

        Returns:
            bool: True iff a code is stored, the supplied code equals it and
            ``now`` is strictly before the stored expiry. Never raises.
        """
        if not stored_code or stored_expiry is None or not isinstance(supplied_code, str):
            return False
        codes_match = hmac.compare_digest(
            stored_code.encode("utf-8"), supplied_code.strip().encode("utf-8")
        )
        return codes_match and _as_utc(now) < _as_utc(stored_expiry)


def _as_utc(value: datetime) -> datetime:
    # Some stores hand back naive timestamps; they are always written in UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
