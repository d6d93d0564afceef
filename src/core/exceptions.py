from __future__ import annotations

"""Centralized, structured exception hierarchy for MarketHub authentication.

Each exception carries a machine-readable `code` for programmatic handling and
a human-readable `message` that is safe to return to the caller. The hierarchy
maps onto HTTP status bands in `src.core.handlers`:

- ValidationError / ConflictError / AuthenticationError -> 400
- InvalidTokenError -> 401
- UserNotFoundError -> 404
- ServerError and subclasses -> 500

Authentication failures use one fixed message per family so that responses
never reveal whether an account exists or why a credential was rejected. The
specific cause belongs in the logs only.
"""

from typing import Dict, Final, Optional

__all__: Final = [
    "MarketHubError",
    "ValidationError",
    "ConflictError",
    "AuthenticationError",
    "InvalidCredentialsError",
    "InvalidResetCodeError",
    "FederatedIdentityError",
    "InvalidTokenError",
    "UserNotFoundError",
    "ServerError",
    "DatabaseError",
    "NotificationError",
    "IdentityProviderUnavailableError",
]


class MarketHubError(Exception):
    """Base exception class for all custom errors in the application.

    Attributes:
        message (str): A human-readable error message, safe to expose.
        code (str): A unique, machine-readable error code.
    """

    message: str
    code: str = "generic_error"

    def __init__(self, message: str, code: str = "generic_error"):
        self.message = message
        self.code = code
        Exception.__init__(self, self.message)

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Input errors (400 Bad Request)
# ---------------------------------------------------------------------------


class ValidationError(MarketHubError):
    """Raised for malformed or missing input, before any store access.

    Attributes:
        errors (dict): Per-field reasons, e.g. ``{"phone": "This field is required."}``.
    """

    def __init__(
        self,
        message: str = "Invalid request",
        code: str = "validation_error",
        errors: Optional[Dict[str, str]] = None,
    ):
        super().__init__(message, code)
        self.errors = errors or {}


class ConflictError(MarketHubError):
    """Raised when a user with the given email already exists.

    The store raises this from its atomic create-if-absent operation, so the
    service never has to read before writing.
    """

    def __init__(self, message: str = "User already exists", code: str = "user_already_exists"):
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Auth-related errors
# ---------------------------------------------------------------------------


class AuthenticationError(MarketHubError):
    """Base for credential failures. Maps to `400 Bad Request`."""

    def __init__(self, message: str = "Authentication failed", code: str = "authentication_error"):
        super().__init__(message, code)


class InvalidCredentialsError(AuthenticationError):
    """Raised for every failed password login.

    Unknown email, federated-only account and wrong password all produce this
    exact error so the response cannot be used to enumerate accounts.
    """

    def __init__(self, message: str = "Invalid credentials", code: str = "invalid_credentials"):
        super().__init__(message, code)


class InvalidResetCodeError(AuthenticationError):
    """Raised when a reset code is missing, wrong, expired or already consumed."""

    def __init__(
        self, message: str = "Invalid or expired reset code", code: str = "invalid_reset_code"
    ):
        super().__init__(message, code)


class FederatedIdentityError(AuthenticationError):
    """Raised when a third-party identity assertion fails verification."""

    def __init__(self, message: str = "Invalid token", code: str = "invalid_federated_assertion"):
        super().__init__(message, code)


class InvalidTokenError(AuthenticationError):
    """Raised when a session token is malformed, tampered with or expired.

    Maps to `401 Unauthorized` with a Bearer challenge.
    """

    def __init__(self, message: str = "Invalid or expired token", code: str = "invalid_token"):
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Lookup errors (404 Not Found)
# ---------------------------------------------------------------------------


class UserNotFoundError(MarketHubError):
    """Raised when an operation targets a user that does not exist."""

    def __init__(self, message: str = "User not found", code: str = "user_not_found"):
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Collaborator failures (500 Internal Server Error)
# ---------------------------------------------------------------------------


class ServerError(MarketHubError):
    """Raised when a store or notification collaborator fails.

    The message is never returned to the caller in production.
    """

    def __init__(self, message: str = "Server error", code: str = "server_error"):
        super().__init__(message, code)


class DatabaseError(ServerError):
    """Wraps unexpected credential store failures."""

    def __init__(self, message: str = "A database error occurred.", code: str = "database_error"):
        super().__init__(message, code)


class NotificationError(ServerError):
    """Raised when a reset code could not be dispatched."""

    def __init__(
        self, message: str = "Failed to send notification", code: str = "notification_error"
    ):
        super().__init__(message, code)


class IdentityProviderUnavailableError(ServerError):
    """Raised when the identity provider's signing keys cannot be fetched."""

    def __init__(
        self,
        message: str = "Identity provider unavailable",
        code: str = "identity_provider_unavailable",
    ):
        super().__init__(message, code)
