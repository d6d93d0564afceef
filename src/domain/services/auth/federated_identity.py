"""Federated identity verification for OpenID Connect ID tokens.

The marketplace accepts Google ID tokens as a substitute for a local password.
An assertion is trusted only after its RS256 signature verifies against the
issuer's published JSON Web Key Set and its issuer, audience and lifetime
claims check out. Nothing from the payload is read before that.
"""

import asyncio
import base64
import json
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

import httpx
from authlib.jose import JsonWebKey, JsonWebToken, KeySet
from authlib.jose.errors import JoseError
from structlog import get_logger
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_fixed

from src.core.exceptions import FederatedIdentityError, IdentityProviderUnavailableError
from src.domain.interfaces.services import IFederatedIdentityVerifier
from src.domain.value_objects.federated_claims import FederatedClaims

logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FederatedIdentityVerifier(IFederatedIdentityVerifier):
    """Validates third-party identity assertions and extracts verified claims.

    Signing keys are fetched from ``jwks_url`` and cached for ``cache_seconds``.
    An assertion signed with a key id that is not in the cache triggers one
    refresh, which covers the provider rotating its keys.

    Attributes:
        client_id (str): The audience every assertion must be issued for.
        jwks_url (str): Where the issuer publishes its signing keys.
        issuers (List[str]): Accepted ``iss`` values.
    """

    MIN_REFRESH_INTERVAL_SECONDS = 30

    def __init__(
        self,
        client_id: str,
        jwks_url: str,
        issuers: List[str],
        cache_seconds: int = 3600,
        clock_skew_seconds: int = 60,
        http_client: Optional[httpx.AsyncClient] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.client_id = client_id
        self.jwks_url = jwks_url
        self.issuers = list(issuers)
        self.cache_seconds = cache_seconds
        self.clock_skew_seconds = clock_skew_seconds
        self._http = http_client or httpx.AsyncClient(timeout=5.0)
        self._owns_http_client = http_client is None
        self._clock = clock
        self._jwt = JsonWebToken(["RS256"])
        self._key_set: Optional[KeySet] = None
        self._keys_fetched_at: Optional[datetime] = None
        self._lock = asyncio.Lock()

    async def verify(self, assertion: str) -> FederatedClaims:
        """Verify an ID token and return the claims it vouches for.

        Raises:
            FederatedIdentityError: If the assertion is malformed, badly signed,
                issued for another audience or by an unknown issuer, expired, or
                lacks a verified email.
            IdentityProviderUnavailableError: If no signing keys can be obtained.
        """
        if not assertion or not isinstance(assertion, str):
            raise FederatedIdentityError()
        if not self.client_id:
            logger.error("Federated login attempted without a configured client id")
            raise FederatedIdentityError()

        kid = self._read_key_id(assertion)
        key_set = await self._get_key_set()
        if kid is not None and not self._has_key(key_set, kid):
            key_set = await self._get_key_set(force_refresh=True)

        now = self._clock()
        try:
            claims = self._jwt.decode(assertion, key_set, claims_options=self._claims_options())
            claims.validate(now=int(now.timestamp()), leeway=self.clock_skew_seconds)
        except (JoseError, ValueError) as e:
            logger.info("Federated assertion rejected", reason=type(e).__name__, detail=str(e))
            raise FederatedIdentityError() from e

        try:
            return FederatedClaims.from_verified_payload(claims)
        except ValueError as e:
            logger.info("Federated assertion rejected", reason="unusable_claims", detail=str(e))
            raise FederatedIdentityError() from e

    async def close(self) -> None:
        if self._owns_http_client:
            await self._http.aclose()

    def _claims_options(self) -> Dict[str, Dict[str, Any]]:
        return {
            "iss": {"essential": True, "values": self.issuers},
            "aud": {"essential": True, "value": self.client_id},
            "exp": {"essential": True},
            "iat": {"essential": True},
            "email": {"essential": True},
        }

    @staticmethod
    def _read_key_id(assertion: str) -> Optional[str]:
        """Read ``kid`` from the unverified header, only to pick a signing key."""
        try:
            header_segment = assertion.split(".")[0]
            padded = header_segment + "=" * (-len(header_segment) % 4)
            header = json.loads(base64.urlsafe_b64decode(padded.encode("ascii")))
        except (ValueError, UnicodeError) as e:
            logger.info("Federated assertion rejected", reason="malformed_header")
            raise FederatedIdentityError() from e
        if not isinstance(header, dict):
            raise FederatedIdentityError()
        kid = header.get("kid")
        return kid if isinstance(kid, str) else None

    @staticmethod
    def _has_key(key_set: KeySet, kid: str) -> bool:
        return any(key.kid == kid for key in key_set.keys)

    async def _get_key_set(self, force_refresh: bool = False) -> KeySet:
        async with self._lock:
            now = self._clock()
            age = (
                (now - self._keys_fetched_at).total_seconds()
                if self._keys_fetched_at is not None
                else None
            )
            if self._key_set is not None and age is not None:
                if not force_refresh and age < self.cache_seconds:
                    return self._key_set
                if force_refresh and age < self.MIN_REFRESH_INTERVAL_SECONDS:
                    return self._key_set

            try:
                jwks = await self._fetch_jwks()
                key_set = JsonWebKey.import_key_set(jwks)
            except (httpx.HTTPError, ValueError, JoseError) as e:
                if self._key_set is not None:
                    logger.warning("JWKS refresh failed, keeping cached keys", error=str(e))
                    return self._key_set
                logger.error("JWKS fetch failed", jwks_url=self.jwks_url, error=str(e))
                raise IdentityProviderUnavailableError() from e

            self._key_set = key_set
            self._keys_fetched_at = now
            logger.debug("JWKS refreshed", key_count=len(key_set.keys))
            return key_set

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_fixed(0.2),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True,
    )
    async def _fetch_jwks(self) -> Dict[str, Any]:
        """Fetch the key set, retrying transient transport failures."""
        response = await self._http.get(self.jwks_url)
        response.raise_for_status()
        return response.json()
