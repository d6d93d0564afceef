"""Dependency injection for the authentication services.

Stateless collaborators (hasher, token issuer, reset-code manager, federated
verifier, notification sender) are built once per process from the settings
singleton. The credential store is built per request around the request's
`AsyncSession`. Tests swap any of these through `app.dependency_overrides`.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config.settings import Settings, settings
from src.domain.interfaces.repositories import ICredentialStore
from src.domain.interfaces.services import IFederatedIdentityVerifier, INotificationSender
from src.domain.services.auth.auth_service import AuthService
from src.domain.services.auth.federated_identity import FederatedIdentityVerifier
from src.domain.services.auth.password_hasher import PasswordHasher
from src.domain.services.auth.reset_code import ResetCodeManager
from src.domain.services.auth.token import TokenIssuer
from src.infrastructure.database.async_db import get_async_db
from src.infrastructure.repositories.user_repository import SQLCredentialStore
from src.infrastructure.services.email.notification_sender import EmailNotificationSender

# ---------------------------------------------------------------------------
# Type aliases for dependency injection
# ---------------------------------------------------------------------------

AsyncDB = Annotated[AsyncSession, Depends(get_async_db)]

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


def get_settings() -> Settings:
    return settings


# ---------------------------------------------------------------------------
# Infrastructure Layer Dependencies
# ---------------------------------------------------------------------------


def get_credential_store(db: AsyncDB) -> ICredentialStore:
    """Factory that returns the SQL credential store bound to the request session."""
    return SQLCredentialStore(db)


@lru_cache(maxsize=1)
def get_notification_sender() -> INotificationSender:
    return EmailNotificationSender(
        settings,
        app_name=settings.EMAIL_FROM_NAME,
        ttl_minutes=settings.RESET_CODE_TTL_MINUTES,
    )


@lru_cache(maxsize=1)
def get_federated_identity_verifier() -> IFederatedIdentityVerifier:
    return FederatedIdentityVerifier(
        client_id=settings.GOOGLE_CLIENT_ID,
        jwks_url=settings.GOOGLE_JWKS_URL,
        issuers=settings.GOOGLE_ISSUERS,
        cache_seconds=settings.FEDERATED_JWKS_CACHE_SECONDS,
        clock_skew_seconds=settings.FEDERATED_CLOCK_SKEW_SECONDS,
    )


# ---------------------------------------------------------------------------
# Domain Service Dependencies
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_password_hasher() -> PasswordHasher:
    return PasswordHasher(work_factor=settings.BCRYPT_WORK_FACTOR)


@lru_cache(maxsize=1)
def get_token_issuer() -> TokenIssuer:
    return TokenIssuer(
        secret=settings.TOKEN_SECRET.get_secret_value(),
        issuer=settings.JWT_ISSUER,
        algorithm=settings.JWT_ALGORITHM,
    )


@lru_cache(maxsize=1)
def get_reset_code_manager() -> ResetCodeManager:
    return ResetCodeManager(ttl=settings.reset_code_ttl)


def get_auth_service(
    store: Annotated[ICredentialStore, Depends(get_credential_store)],
    hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
    tokens: Annotated[TokenIssuer, Depends(get_token_issuer)],
    reset_codes: Annotated[ResetCodeManager, Depends(get_reset_code_manager)],
    verifier: Annotated[IFederatedIdentityVerifier, Depends(get_federated_identity_verifier)],
    notifier: Annotated[INotificationSender, Depends(get_notification_sender)],
    app_settings: Annotated[Settings, Depends(get_settings)],
) -> AuthService:
    """Factory that assembles `AuthService` for one request."""
    return AuthService(
        store=store,
        hasher=hasher,
        tokens=tokens,
        reset_codes=reset_codes,
        verifier=verifier,
        notifier=notifier,
        settings=app_settings,
    )


# ---------------------------------------------------------------------------
# Clean Architecture Type Aliases
# ---------------------------------------------------------------------------

CleanAuthService = Annotated[AuthService, Depends(get_auth_service)]
CleanTokenIssuer = Annotated[TokenIssuer, Depends(get_token_issuer)]
