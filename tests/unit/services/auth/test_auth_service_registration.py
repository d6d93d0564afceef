import asyncio
from unittest.mock import AsyncMock

import pytest

from src.core.exceptions import ConflictError, DatabaseError, ValidationError
from src.domain.interfaces.repositories import ICredentialStore
from src.domain.services.auth.auth_service import AuthService
from src.domain.services.auth.reset_code import ResetCodeManager


@pytest.mark.asyncio
async def test_register_returns_token_and_public_user(auth_service, token_issuer):
    result = await auth_service.register("Alice", "a@x.com", "Passw0rd!", "9999999999")

    assert result.user.email == "a@x.com"
    assert result.user.name == "Alice"
    assert result.user.role == "user"
    assert result.token
    assert token_issuer.verify(result.token).subject == result.user.id
    assert not hasattr(result.user, "hashed_password")
    assert not hasattr(result.user, "reset_code")


@pytest.mark.asyncio
async def test_register_issues_a_24_hour_token(auth_service, token_issuer, clock):
    result = await auth_service.register("Alice", "a@x.com", "Passw0rd!", "9999999999")

    claims = token_issuer.verify(result.token)
    assert claims.issued_at == clock()
    assert (claims.expires_at - claims.issued_at).total_seconds() == 24 * 3600


@pytest.mark.asyncio
async def test_register_stores_a_digest_not_the_password(auth_service, store, hasher):
    result = await auth_service.register("Alice", "a@x.com", "Passw0rd!", "9999999999")

    stored = await store.find_by_id(result.user.id)
    assert stored.hashed_password != "Passw0rd!"
    assert hasher.verify("Passw0rd!", stored.hashed_password)


@pytest.mark.asyncio
async def test_register_normalizes_email(auth_service, store):
    result = await auth_service.register("Bob", "  Bob@Example.COM ", "Passw0rd!", "555")

    assert result.user.email == "bob@example.com"
    assert await store.find_by_email("bob@example.com") is not None


@pytest.mark.asyncio
async def test_register_keeps_optional_location_and_professional_role(auth_service):
    result = await auth_service.register(
        "Pat", "pat@x.com", "Passw0rd!", "555", role="professional", location="Berlin"
    )

    assert result.user.role == "professional"
    assert result.user.location == "Berlin"


@pytest.mark.asyncio
async def test_duplicate_email_is_a_conflict_and_one_record_remains(auth_service, store):
    await auth_service.register("Alice", "a@x.com", "Passw0rd!", "9999999999")

    with pytest.raises(ConflictError) as exc_info:
        await auth_service.register("Alice Again", "A@X.com", "0therPass!", "1111111111")

    assert exc_info.value.message == "User already exists"
    assert len(store) == 1


@pytest.mark.asyncio
async def test_concurrent_registrations_for_one_email_create_one_user(auth_service, store):
    outcomes = await asyncio.gather(
        *[auth_service.register(f"User {i}", "race@x.com", "Passw0rd!", "555") for i in range(5)],
        return_exceptions=True,
    )

    successes = [o for o in outcomes if not isinstance(o, Exception)]
    conflicts = [o for o in outcomes if isinstance(o, ConflictError)]
    assert len(successes) == 1
    assert len(conflicts) == 4
    assert len(store) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "fields, missing",
    [
        ({"name": None}, "name"),
        ({"email": ""}, "email"),
        ({"password": "   "}, "password"),
        ({"phone": None}, "phone"),
    ],
)
async def test_missing_required_field_is_rejected(auth_service, store, fields, missing):
    payload = {"name": "Alice", "email": "a@x.com", "password": "Passw0rd!", "phone": "555"}
    payload.update(fields)

    with pytest.raises(ValidationError) as exc_info:
        await auth_service.register(**payload)

    assert missing in exc_info.value.errors
    assert len(store) == 0


@pytest.mark.asyncio
async def test_all_missing_fields_are_reported_together(auth_service):
    with pytest.raises(ValidationError) as exc_info:
        await auth_service.register(None, None, None, None)

    assert set(exc_info.value.errors) == {"name", "email", "password", "phone"}
    assert exc_info.value.message == "All fields are required"


@pytest.mark.asyncio
@pytest.mark.parametrize("role", ["admin", "superuser"])
async def test_non_self_assignable_role_is_rejected(auth_service, store, role):
    with pytest.raises(ValidationError) as exc_info:
        await auth_service.register("Eve", "eve@x.com", "Passw0rd!", "555", role=role)

    assert "role" in exc_info.value.errors
    assert len(store) == 0


@pytest.mark.asyncio
async def test_malformed_email_is_rejected(auth_service):
    with pytest.raises(ValidationError) as exc_info:
        await auth_service.register("Alice", "not-an-email", "Passw0rd!", "555")

    assert "email" in exc_info.value.errors


@pytest.mark.asyncio
async def test_validation_happens_before_store_access(hasher, token_issuer, verifier, notifier, settings):
    store = AsyncMock(spec=ICredentialStore)
    service = AuthService(
        store, hasher, token_issuer, ResetCodeManager(), verifier, notifier, settings
    )

    with pytest.raises(ValidationError):
        await service.register("Alice", "a@x.com", "Passw0rd!", "")

    store.create.assert_not_awaited()
    store.find_by_email.assert_not_awaited()


@pytest.mark.asyncio
async def test_unexpected_store_failure_becomes_database_error(
    hasher, token_issuer, verifier, notifier, settings
):
    store = AsyncMock(spec=ICredentialStore)
    store.create.side_effect = RuntimeError("connection reset by peer")
    service = AuthService(
        store, hasher, token_issuer, ResetCodeManager(), verifier, notifier, settings
    )

    with pytest.raises(DatabaseError) as exc_info:
        await service.register("Alice", "a@x.com", "Passw0rd!", "555")

    assert "connection reset" not in exc_info.value.message
    assert isinstance(exc_info.value.__cause__, RuntimeError)
