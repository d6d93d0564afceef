from __future__ import annotations

"""
Asynchronous Database Utilities Module

This module provides the asynchronous database access used by the credential
store, built on SQLAlchemy's asyncio support and SQLModel metadata.

**Security Note**: Ensure that the database connection URL (DATABASE_URL) is configured for SSL/TLS when
connecting over untrusted networks. asyncpg does not understand 'sslmode' in the query string; it is
stripped here and SSL must be configured through the driver instead. Never log the URL itself.

Key Components:
    - get_engine: Lazily creates the asynchronous engine on first use.
    - get_session_factory: A factory for creating asynchronous database sessions.
    - get_async_db: A FastAPI dependency yielding async sessions.
    - create_async_db_and_tables: Utility to create tables using the async engine.
"""

import urllib.parse as urlparse
from functools import lru_cache
from typing import AsyncGenerator

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel
from structlog import get_logger

from src.core.config.settings import settings
from src.domain.entities.user import User  # noqa: F401 - registers the table

logger = get_logger(__name__)


def _build_async_url(database_url: str) -> str:
    """
    Build the asynchronous database URL.

    Replaces a synchronous psycopg2 driver with asyncpg and drops query
    parameters asyncpg does not accept, such as sslmode.

    Returns:
        str: The cleaned asynchronous database URL.
    """
    async_url = database_url.replace("postgresql+psycopg2", "postgresql+asyncpg")
    if async_url.startswith("postgresql://"):
        async_url = async_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    parsed = urlparse.urlparse(async_url)
    query = dict(urlparse.parse_qsl(parsed.query))
    query.pop("sslmode", None)
    parsed = parsed._replace(query=urlparse.urlencode(query))
    return urlparse.urlunparse(parsed)


@lru_cache(maxsize=1)
def get_engine() -> AsyncEngine:
    """Create the engine on first use so importing this module needs no driver."""
    url = make_url(_build_async_url(settings.DATABASE_URL))
    logger.info("Creating async database engine", driver=url.drivername, database=url.database)
    return create_async_engine(url, echo=settings.DATABASE_ECHO, pool_pre_ping=True)


@lru_cache(maxsize=1)
def get_session_factory() -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=get_engine(), class_=AsyncSession, expire_on_commit=False)


async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that yields an AsyncSession.

    Rolls back the transaction if the request raises and always closes the
    session.

    Yields:
        AsyncSession: An asynchronous database session for use in FastAPI routes.
    """
    async with get_session_factory()() as session:
        logger.debug("Async database session created")
        try:
            yield session
        except Exception:
            await session.rollback()
            logger.error("Async database session rollback due to error")
            raise
        finally:
            await session.close()
            logger.debug("Async database session closed")


async def create_async_db_and_tables() -> None:
    """Create the credential tables if they do not exist yet."""
    logger.info("Creating async database tables")
    async with get_engine().begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("Async database tables created")


async def dispose_engine() -> None:
    """Close pooled connections if an engine was ever created."""
    if get_engine.cache_info().currsize:
        await get_engine().dispose()
        logger.info("Async database engine disposed")
