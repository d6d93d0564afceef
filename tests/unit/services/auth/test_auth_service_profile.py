import pytest
import pytest_asyncio

from src.core.exceptions import ConflictError, UserNotFoundError, ValidationError
from src.domain.value_objects.auth_result import ProfileUpdate


@pytest_asyncio.fixture
async def alice(auth_service):
    result = await auth_service.register(
        "Alice", "a@x.com", "Passw0rd!", "9999999999", location="Paris"
    )
    return result.user


@pytest.mark.asyncio
async def test_only_supplied_fields_change(auth_service, store, clock, alice):
    clock.advance(minutes=5)

    updated = await auth_service.update_profile(alice.id, ProfileUpdate(address="1 Main St"))

    assert updated.address == "1 Main St"
    assert updated.name == "Alice"
    assert updated.phone == "9999999999"
    assert updated.location == "Paris"
    stored = await store.find_by_id(alice.id)
    assert stored.updated_at == clock()


@pytest.mark.asyncio
async def test_all_editable_fields_can_change(auth_service, alice):
    updated = await auth_service.update_profile(
        alice.id,
        ProfileUpdate(name="Alicia", email="Alicia@X.com", phone="123", address="2 Side St", location="Rome"),
    )

    assert (updated.name, updated.email, updated.phone, updated.address, updated.location) == (
        "Alicia",
        "alicia@x.com",
        "123",
        "2 Side St",
        "Rome",
    )
    assert updated.id == alice.id
    assert updated.role == "user"


@pytest.mark.asyncio
async def test_changed_email_is_used_for_login(auth_service, alice):
    await auth_service.update_profile(alice.id, ProfileUpdate(email="new@x.com"))

    result = await auth_service.login("new@x.com", "Passw0rd!")

    assert result.user.id == alice.id


@pytest.mark.asyncio
async def test_email_taken_by_another_user_is_a_conflict(auth_service, alice):
    await auth_service.register("Bob", "b@x.com", "Passw0rd!", "555")

    with pytest.raises(ConflictError):
        await auth_service.update_profile(alice.id, ProfileUpdate(email="B@x.com"))


@pytest.mark.asyncio
async def test_malformed_email_is_rejected(auth_service, alice):
    with pytest.raises(ValidationError) as exc_info:
        await auth_service.update_profile(alice.id, ProfileUpdate(email="nope"))

    assert "email" in exc_info.value.errors


@pytest.mark.asyncio
async def test_unknown_user_is_not_found(auth_service):
    with pytest.raises(UserNotFoundError):
        await auth_service.update_profile("does-not-exist", ProfileUpdate(name="Ghost"))


@pytest.mark.asyncio
async def test_empty_update_returns_current_profile(auth_service, store, alice):
    updated = await auth_service.update_profile(alice.id, ProfileUpdate())

    assert updated == alice
    assert (await store.find_by_id(alice.id)).updated_at is None


@pytest.mark.asyncio
async def test_blank_values_leave_fields_unchanged(auth_service, store, alice):
    updated = await auth_service.update_profile(
        alice.id, ProfileUpdate(name="", phone="   ", location="Rome")
    )

    assert updated.name == "Alice"
    assert updated.phone == "9999999999"
    assert updated.location == "Rome"
    stored = await store.find_by_id(alice.id)
    assert (stored.name, stored.phone) == ("Alice", "9999999999")
