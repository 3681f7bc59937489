"""Startup connection check with retry and exponential backoff."""

import asyncio
import logging
import random

from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.sql import text

from urlshort.core.config import settings

logger = logging.getLogger(__name__)


def backoff_delay(attempt: int) -> float:
    """Delay before the next attempt, with jitter applied."""
    delay = min(
        settings.DB_CONNECT_RETRY_INITIAL_DELAY * (2 ** (attempt - 1)),
        settings.DB_CONNECT_RETRY_MAX_DELAY,
    )
    jitter = delay * settings.DB_CONNECT_RETRY_JITTER
    if jitter > 0:
        return max(0.0, delay + random.uniform(-jitter, jitter))
    return delay


async def initialize_database_connection(engine: AsyncEngine) -> bool:
    """Verify the database is reachable, retrying with backoff.

    Returns:
        bool: True if a connection was established, False otherwise
    """
    max_attempts = settings.DB_CONNECT_RETRY_ATTEMPTS

    for attempt in range(1, max_attempts + 1):
        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))

            logger.info(f"Database connection established on attempt {attempt}")
            return True

        except Exception as e:
            if attempt < max_attempts:
                wait = backoff_delay(attempt)
                logger.warning(
                    f"Database connection attempt {attempt}/{max_attempts} failed: {e}. "
                    f"Retrying in {wait:.2f} seconds..."
                )
                await asyncio.sleep(wait)
            else:
                logger.error(
                    f"Failed to connect to database after {max_attempts} attempts. "
                    f"Last error: {e}"
                )

    return False
