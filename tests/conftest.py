import os

# Settings are read once at import time; the test environment must be in
# place before anything under src is imported.
os.environ["APP_ENV"] = "test"
os.environ["TOKEN_SECRET"] = "test-secret-key-that-is-at-least-32-characters"
os.environ["BCRYPT_WORK_FACTOR"] = "4"
os.environ["DATABASE_CREATE_TABLES"] = "false"
os.environ["GOOGLE_CLIENT_ID"] = "test-client.apps.googleusercontent.com"
os.environ["LOG_JSON"] = "false"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from src.core.application import create_application
from src.core.config.settings import settings as app_settings
from src.domain.services.auth.auth_service import AuthService
from src.domain.services.auth.password_hasher import PasswordHasher
from src.domain.services.auth.reset_code import ResetCodeManager
from src.domain.services.auth.token import TokenIssuer
from src.infrastructure.dependency_injection.auth_dependencies import (
    get_credential_store,
    get_federated_identity_verifier,
    get_notification_sender,
    get_password_hasher,
)
from src.infrastructure.repositories.in_memory import InMemoryCredentialStore
from tests.utils.doubles import FrozenClock, RecordingNotifier, StubFederatedVerifier


@pytest.fixture(scope="session")
def settings():
    return app_settings


@pytest.fixture(scope="session")
def hasher():
    # Minimum bcrypt cost keeps the suite fast.
    return PasswordHasher(work_factor=4)


@pytest.fixture
def token_issuer(settings):
    return TokenIssuer(
        secret=settings.TOKEN_SECRET.get_secret_value(),
        issuer=settings.JWT_ISSUER,
        algorithm=settings.JWT_ALGORITHM,
    )


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def store():
    return InMemoryCredentialStore()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def verifier():
    return StubFederatedVerifier()


@pytest.fixture
def auth_service(store, hasher, token_issuer, verifier, notifier, settings, clock):
    return AuthService(
        store=store,
        hasher=hasher,
        tokens=token_issuer,
        reset_codes=ResetCodeManager(ttl=settings.reset_code_ttl),
        verifier=verifier,
        notifier=notifier,
        settings=settings,
        clock=clock,
    )


@pytest.fixture
def app(store, hasher, verifier, notifier):
    application = create_application()
    application.dependency_overrides[get_credential_store] = lambda: store
    application.dependency_overrides[get_password_hasher] = lambda: hasher
    application.dependency_overrides[get_federated_identity_verifier] = lambda: verifier
    application.dependency_overrides[get_notification_sender] = lambda: notifier
    yield application
    application.dependency_overrides.clear()


@pytest_asyncio.fixture
async def async_client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
