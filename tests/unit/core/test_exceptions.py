import pytest

from src.core.exceptions import (
    AuthenticationError,
    ConflictError,
    DatabaseError,
    FederatedIdentityError,
    InvalidCredentialsError,
    InvalidResetCodeError,
    InvalidTokenError,
    MarketHubError,
    NotificationError,
    ServerError,
    UserNotFoundError,
    ValidationError,
)


def test_authentication_error_default():
    error = AuthenticationError()

    assert error.message == "Authentication failed"
    assert error.code == "authentication_error"
    assert str(error) == "Authentication failed"


def test_authentication_error_custom_code():
    error = AuthenticationError("Nope", "auth_failed")

    assert error.message == "Nope"
    assert error.code == "auth_failed"


def test_validation_error_carries_field_errors():
    error = ValidationError("All fields are required", errors={"phone": "This field is required."})

    assert error.errors == {"phone": "This field is required."}
    assert ValidationError().errors == {}


@pytest.mark.parametrize(
    "error_cls, message",
    [
        (InvalidCredentialsError, "Invalid credentials"),
        (InvalidResetCodeError, "Invalid or expired reset code"),
        (FederatedIdentityError, "Invalid token"),
        (InvalidTokenError, "Invalid or expired token"),
    ],
)
def test_credential_failures_share_the_authentication_family(error_cls, message):
    error = error_cls()

    assert isinstance(error, AuthenticationError)
    assert error.message == message


@pytest.mark.parametrize("error_cls", [DatabaseError, NotificationError])
def test_collaborator_failures_are_server_errors(error_cls):
    assert issubclass(error_cls, ServerError)


@pytest.mark.parametrize(
    "error_cls", [ValidationError, ConflictError, UserNotFoundError, ServerError, AuthenticationError]
)
def test_every_error_derives_from_base(error_cls):
    assert issubclass(error_cls, MarketHubError)
