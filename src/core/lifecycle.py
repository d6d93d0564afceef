"""Application lifecycle management.

This module handles application startup and shutdown events, ensuring proper
initialization and cleanup of application resources.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.core.config.settings import Settings
from src.core.logging import logger
from src.infrastructure.database.async_db import create_async_db_and_tables, dispose_engine
from src.infrastructure.dependency_injection.auth_dependencies import (
    get_federated_identity_verifier,
)


def create_lifespan_manager(app_settings: Settings):
    """Create the application lifespan manager.

    Returns:
        AsyncContextManager: The lifespan manager for the FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Creates the credential tables on startup when configured, and
        releases the database pool and the identity provider HTTP client on
        shutdown.
        """
        # Startup
        if app_settings.DATABASE_CREATE_TABLES:
            await create_async_db_and_tables()
        logger.info("application_startup", env=app_settings.APP_ENV, version=app_settings.VERSION)

        yield

        # Shutdown
        if get_federated_identity_verifier.cache_info().currsize:
            await get_federated_identity_verifier().close()
        await dispose_engine()
        logger.info("application_shutdown", env=app_settings.APP_ENV)

    return lifespan
