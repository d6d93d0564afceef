from datetime import datetime, timedelta, timezone
from typing import Optional

from jwt import PyJWTError
from jwt import decode as jwt_decode
from jwt import encode as jwt_encode
from structlog import get_logger

from src.core.exceptions import InvalidTokenError
from src.domain.value_objects.session_token import TokenClaims, TokenId

logger = get_logger(__name__)


class TokenIssuer:
    """Creates and verifies signed, time-bounded session tokens.

    Tokens are HS256 JWTs signed with a server-held secret and carry the
    subject id, issue time, expiry, issuer and a random ``jti``. They are
    stateless: nothing is stored server-side, so expiry is the only way a
    token stops being valid.

    Attributes:
        issuer (str): Value written to and required in the ``iss`` claim.
        algorithm (str): JWS algorithm used for signing.
    """

    def __init__(self, secret: str, issuer: str, algorithm: str = "HS256"):
        if not secret:
            raise ValueError("A token signing secret is required")
        self._secret = secret
        self.issuer = issuer
        self.algorithm = algorithm

    def issue(self, subject_id: str, ttl: timedelta, now: Optional[datetime] = None) -> str:
        """Create a signed token for ``subject_id`` valid for ``ttl``.

        Args:
            subject_id: The user id the token proves.
            ttl: How long the token stays valid.
            now: Issue time; defaults to the current UTC time.

        Returns:
            str: The encoded token.
        """
        issued_at = now or datetime.now(timezone.utc)
        token_id = TokenId.generate()
        payload = {
            "sub": str(subject_id),
            "iat": issued_at,
            "exp": issued_at + ttl,
            "iss": self.issuer,
            "jti": str(token_id),
        }
        token = jwt_encode(payload, self._secret, algorithm=self.algorithm)
        logger.debug("Session token issued", user_id=subject_id, jti=token_id.mask_for_logging())
        return token

    def verify(self, token: str) -> TokenClaims:
        """Verify a token's signature, issuer and expiry.

        Args:
            token: The encoded token.

        Returns:
            TokenClaims: The verified claims.

        Raises:
            InvalidTokenError: If the token is malformed, tampered with,
                signed with another key, issued by someone else or expired.
        """
        try:
            payload = jwt_decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                options={"require": ["sub", "iat", "exp", "iss", "jti"]},
            )
        except PyJWTError as e:
            logger.info("Session token rejected", reason=type(e).__name__)
            raise InvalidTokenError() from e

        return TokenClaims(
            subject=payload["sub"],
            issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            token_id=payload["jti"],
        )
