"""Application factory for creating and configuring the FastAPI application.

This module provides a factory function to create a properly configured FastAPI application
with all necessary middleware, exception handlers, and routers registered.
"""

from typing import Optional

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from src.adapters.api.v1 import api_router
from src.core.config.settings import Settings, settings as default_settings
from src.core.handlers import register_exception_handlers
from src.core.lifecycle import create_lifespan_manager
from src.core.middleware import configure_middleware


def create_application(app_settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        app_settings: Settings to build the app from; defaults to the
            process-wide settings.

    Returns:
        FastAPI: The configured FastAPI application instance
    """
    app_settings = app_settings or default_settings
    app = FastAPI(
        title=app_settings.PROJECT_NAME,
        version=app_settings.VERSION,
        description="Authentication and credential lifecycle for the MarketHub marketplace.",
        docs_url=None if app_settings.is_production else "/docs",
        redoc_url=None,
        openapi_url=None if app_settings.is_production else "/openapi.json",
        lifespan=create_lifespan_manager(app_settings),
        default_response_class=JSONResponse,
    )

    # Configure middleware
    configure_middleware(app, app_settings)

    # Register exception handlers
    register_exception_handlers(app, expose_errors=app_settings.DEBUG and not app_settings.is_production)

    # Include routers
    app.include_router(api_router, prefix="/api/v1")

    return app
