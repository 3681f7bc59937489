"""Database base configuration for async SQLAlchemy with SQLModel.

This module provides:
- Engine configuration per environment
- The process-wide session factory
- Health check functionality
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool
from sqlalchemy.sql import text

from urlshort.core.config import settings

logger = logging.getLogger(__name__)


def get_engine_config() -> Dict[str, Any]:
    """Get the engine configuration for the current environment.

    Returns:
        Dict: Keyword arguments for create_async_engine.
    """
    if settings.ENVIRONMENT.value == "testing":
        return {"echo": False, "poolclass": NullPool}

    return {
        "echo": settings.DB_ECHO,
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_POOL_MAX_OVERFLOW,
        "pool_timeout": settings.DB_POOL_TIMEOUT,
        "pool_recycle": settings.DB_POOL_RECYCLE,
        "pool_pre_ping": True,
        "connect_args": settings.database_connect_args(),
    }


def get_engine() -> AsyncEngine:
    """Create and configure an async SQLAlchemy engine.

    Returns:
        AsyncEngine: Configured SQLAlchemy async engine instance.
    """
    engine = create_async_engine(
        settings.SQLALCHEMY_DATABASE_URI,
        **get_engine_config(),
    )
    logger.info(f"Created database engine for {engine.url.render_as_string(hide_password=True)}")
    return engine


def make_session_factory(bind: AsyncEngine) -> async_sessionmaker:
    """Build a session factory bound to the given engine."""
    return async_sessionmaker(
        bind=bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


# Shared async engine instance
engine = get_engine()

# Async session factory
async_session_factory = make_session_factory(engine)


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Get async session with proper cleanup.

    Yields:
        AsyncSession: SQLAlchemy async session
    """
    session = async_session_factory()
    try:
        yield session
    finally:
        await session.close()


class DatabaseHealthCheck:
    """Health check functionality for the database connection."""

    @staticmethod
    async def check_connection(session: AsyncSession) -> Dict[str, Any]:
        """Check database connectivity and return status.

        Returns:
            Dict: Health check result containing status and latency information
        """
        loop = asyncio.get_running_loop()
        start_time = loop.time()
        status = "healthy"
        error_message = None
        latency_ms = 0

        try:
            await session.execute(text("SELECT 1"))
            latency_ms = int((loop.time() - start_time) * 1000)
        except Exception as e:
            status = "unhealthy"
            error_message = str(e)
            logger.error(f"Database health check failed: {e}")

        return {
            "status": status,
            "latency_ms": latency_ms,
            "error": error_message,
        }
