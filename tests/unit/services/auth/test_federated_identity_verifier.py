from datetime import datetime, timezone

import httpx
import pytest
import pytest_asyncio
from authlib.jose import JsonWebKey, JsonWebToken

from src.core.exceptions import FederatedIdentityError, IdentityProviderUnavailableError
from src.domain.services.auth.federated_identity import FederatedIdentityVerifier
from tests.utils.doubles import FrozenClock

CLIENT_ID = "test-client.apps.googleusercontent.com"
JWKS_URL = "https://idp.test/certs"
ISSUER = "https://accounts.google.com"


@pytest.fixture(scope="module")
def signing_key():
    return JsonWebKey.generate_key("RSA", 2048, options={"kid": "key-1"}, is_private=True)


@pytest.fixture(scope="module")
def rotated_key():
    return JsonWebKey.generate_key("RSA", 2048, options={"kid": "key-2"}, is_private=True)


class JWKSEndpoint:
    """Serves a mutable key set and counts fetches."""

    def __init__(self, *keys):
        self.keys = list(keys)
        self.calls = 0
        self.fail_with = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls += 1
        if self.fail_with is not None:
            raise self.fail_with
        return httpx.Response(200, json={"keys": [k.as_dict(is_private=False) for k in self.keys]})


@pytest.fixture
def clock():
    return FrozenClock(datetime.now(timezone.utc).replace(microsecond=0))


@pytest.fixture
def endpoint(signing_key):
    return JWKSEndpoint(signing_key)


@pytest_asyncio.fixture
async def verifier(endpoint, clock):
    client = httpx.AsyncClient(transport=httpx.MockTransport(endpoint))
    instance = FederatedIdentityVerifier(
        client_id=CLIENT_ID,
        jwks_url=JWKS_URL,
        issuers=[ISSUER, "accounts.google.com"],
        cache_seconds=3600,
        clock_skew_seconds=60,
        http_client=client,
        clock=clock,
    )
    yield instance
    await client.aclose()


def make_assertion(key, clock, **overrides):
    now = int(clock().timestamp())
    payload = {
        "iss": ISSUER,
        "aud": CLIENT_ID,
        "sub": "10769150350006150715113082367",
        "email": "Alice@Example.com",
        "email_verified": True,
        "name": "Alice Smith",
        "picture": "https://lh3.googleusercontent.com/a/alice",
        "iat": now,
        "exp": now + 3600,
    }
    payload.update(overrides)
    payload = {k: v for k, v in payload.items() if v is not None}
    header = {"alg": "RS256", "kid": key.kid}
    return JsonWebToken(["RS256"]).encode(header, payload, key).decode("ascii")


@pytest.mark.asyncio
async def test_valid_assertion_yields_normalized_claims(verifier, signing_key, clock):
    claims = await verifier.verify(make_assertion(signing_key, clock))

    assert claims.email == "alice@example.com"
    assert claims.name == "Alice Smith"
    assert claims.picture == "https://lh3.googleusercontent.com/a/alice"


@pytest.mark.asyncio
async def test_missing_name_falls_back_to_local_part(verifier, signing_key, clock):
    claims = await verifier.verify(make_assertion(signing_key, clock, name=None, picture=None))

    assert claims.name is None
    assert claims.picture is None
    assert claims.display_name == "alice"


@pytest.mark.asyncio
async def test_keys_are_cached_between_verifications(verifier, endpoint, signing_key, clock):
    await verifier.verify(make_assertion(signing_key, clock))
    await verifier.verify(make_assertion(signing_key, clock))

    assert endpoint.calls == 1


@pytest.mark.asyncio
async def test_cache_expiry_triggers_refetch(verifier, endpoint, signing_key, clock):
    await verifier.verify(make_assertion(signing_key, clock))
    clock.advance(seconds=3601)
    await verifier.verify(make_assertion(signing_key, clock))

    assert endpoint.calls == 2


@pytest.mark.asyncio
async def test_unknown_kid_refreshes_keys_once(verifier, endpoint, signing_key, rotated_key, clock):
    await verifier.verify(make_assertion(signing_key, clock))
    endpoint.keys = [signing_key, rotated_key]
    clock.advance(seconds=60)

    claims = await verifier.verify(make_assertion(rotated_key, clock))

    assert claims.email == "alice@example.com"
    assert endpoint.calls == 2


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides",
    [
        {"aud": "someone-else.apps.googleusercontent.com"},
        {"iss": "https://evil.example"},
        {"email": None},
        {"email_verified": False},
    ],
    ids=["wrong-audience", "wrong-issuer", "no-email", "unverified-email"],
)
async def test_invalid_claims_are_rejected(verifier, signing_key, clock, overrides):
    with pytest.raises(FederatedIdentityError):
        await verifier.verify(make_assertion(signing_key, clock, **overrides))


@pytest.mark.asyncio
async def test_expired_assertion_is_rejected(verifier, signing_key, clock):
    issued = int(clock().timestamp()) - 7200
    assertion = make_assertion(signing_key, clock, iat=issued, exp=issued + 3600)

    with pytest.raises(FederatedIdentityError):
        await verifier.verify(assertion)


@pytest.mark.asyncio
async def test_assertion_within_clock_skew_is_accepted(verifier, signing_key, clock):
    now = int(clock().timestamp())
    assertion = make_assertion(signing_key, clock, iat=now - 3630, exp=now - 30)

    claims = await verifier.verify(assertion)

    assert claims.email == "alice@example.com"


@pytest.mark.asyncio
async def test_assertion_signed_by_unpublished_key_is_rejected(verifier, rotated_key, clock):
    with pytest.raises(FederatedIdentityError):
        await verifier.verify(make_assertion(rotated_key, clock))


@pytest.mark.asyncio
async def test_tampered_payload_is_rejected(verifier, signing_key, clock):
    genuine = make_assertion(signing_key, clock)
    forged = make_assertion(signing_key, clock, email="mallory@example.com")
    header, _, signature = genuine.split(".")
    tampered = ".".join([header, forged.split(".")[1], signature])

    with pytest.raises(FederatedIdentityError):
        await verifier.verify(tampered)


@pytest.mark.asyncio
@pytest.mark.parametrize("assertion", ["", None, "not-a-jwt", "####.payload.sig"])
async def test_malformed_assertions_are_rejected(verifier, assertion):
    with pytest.raises(FederatedIdentityError):
        await verifier.verify(assertion)


@pytest.mark.asyncio
async def test_unreachable_key_endpoint_is_a_server_error(verifier, endpoint, signing_key, clock):
    endpoint.fail_with = httpx.ConnectError("connection refused")

    with pytest.raises(IdentityProviderUnavailableError):
        await verifier.verify(make_assertion(signing_key, clock))
    assert endpoint.calls == 3


@pytest.mark.asyncio
async def test_stale_keys_are_used_when_refresh_fails(verifier, endpoint, signing_key, clock):
    await verifier.verify(make_assertion(signing_key, clock))
    clock.advance(seconds=3601)
    endpoint.fail_with = httpx.ConnectError("connection refused")

    claims = await verifier.verify(make_assertion(signing_key, clock))

    assert claims.email == "alice@example.com"


@pytest.mark.asyncio
async def test_missing_client_id_rejects_everything(endpoint, signing_key, clock):
    async with httpx.AsyncClient(transport=httpx.MockTransport(endpoint)) as client:
        verifier = FederatedIdentityVerifier(
            client_id="", jwks_url=JWKS_URL, issuers=[ISSUER], http_client=client, clock=clock
        )
        with pytest.raises(FederatedIdentityError):
            await verifier.verify(make_assertion(signing_key, clock))
    assert endpoint.calls == 0


@pytest.mark.asyncio
async def test_close_only_closes_owned_client(verifier):
    await verifier.close()

    assert not verifier._http.is_closed
