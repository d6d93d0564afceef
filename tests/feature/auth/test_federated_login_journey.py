"""Feature tests for signing in with a Google ID token."""

import pytest
from jose import jwt

from src.core.exceptions import IdentityProviderUnavailableError
from src.domain.value_objects.federated_claims import FederatedClaims

GOOGLE_URL = "/api/v1/auth/google"


class TestFederatedLoginJourney:
    @pytest.mark.asyncio
    async def test_first_login_provisions_account(self, async_client, verifier, store, settings):
        verifier.register(
            "good-assertion",
            FederatedClaims(email="carol@example.com", name="Carol", picture="https://img/c.png"),
        )

        response = await async_client.post(GOOGLE_URL, json={"credential": "good-assertion"})

        assert response.status_code == 200
        body = response.json()
        assert body["user"]["email"] == "carol@example.com"
        assert body["user"]["name"] == "Carol"
        assert body["user"]["avatar"] == "https://img/c.png"
        assert body["user"]["role"] == "user"
        claims = jwt.decode(
            body["token"],
            settings.TOKEN_SECRET.get_secret_value(),
            algorithms=["HS256"],
            issuer=settings.JWT_ISSUER,
        )
        assert claims["exp"] - claims["iat"] == 7 * 24 * 3600
        assert len(store) == 1

    @pytest.mark.asyncio
    async def test_repeat_login_reuses_account(self, async_client, verifier, store):
        verifier.register("good-assertion", FederatedClaims(email="carol@example.com", name="Carol"))

        first = await async_client.post(GOOGLE_URL, json={"assertion": "good-assertion"})
        second = await async_client.post(GOOGLE_URL, json={"assertion": "good-assertion"})

        assert first.json()["user"]["id"] == second.json()["user"]["id"]
        assert len(store) == 1

    @pytest.mark.asyncio
    async def test_federated_account_cannot_use_password_login(self, async_client, verifier):
        verifier.register("good-assertion", FederatedClaims(email="carol@example.com"))
        await async_client.post(GOOGLE_URL, json={"assertion": "good-assertion"})

        response = await async_client.post(
            "/api/v1/auth/login", json={"email": "carol@example.com", "password": ""}
        )

        assert response.status_code == 400
        assert response.json()["code"] == "invalid_credentials"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [{"assertion": "forged"}, {}])
    async def test_rejected_assertion_is_400(self, async_client, store, payload):
        response = await async_client.post(GOOGLE_URL, json=payload)

        assert response.status_code == 400
        assert response.json() == {"detail": "Invalid token", "code": "invalid_federated_assertion"}
        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_provider_outage_is_a_server_error(self, async_client, verifier):
        verifier.register("any", IdentityProviderUnavailableError())

        response = await async_client.post(GOOGLE_URL, json={"assertion": "any"})

        assert response.status_code == 500
        assert response.json()["code"] == "identity_provider_unavailable"
