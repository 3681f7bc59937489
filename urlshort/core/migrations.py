"""Alembic migration helpers.

The migration environment lives in ``urlshort/migrations``. The Alembic
configuration is built in code so no ``alembic.ini`` has to ship with
the package.
"""

import logging
from pathlib import Path
from typing import Optional

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from sqlalchemy.ext.asyncio import AsyncEngine

from urlshort.core.config import settings

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parent.parent / "migrations"


def get_alembic_config(database_uri: Optional[str] = None) -> Config:
    """Build an Alembic config pointing at the bundled migration scripts."""
    alembic_cfg = Config()
    alembic_cfg.set_main_option("script_location", str(MIGRATIONS_DIR))
    uri = database_uri or settings.SQLALCHEMY_DATABASE_URI
    # ConfigParser interpolation treats % as special
    alembic_cfg.set_main_option("sqlalchemy.url", uri.replace("%", "%%"))
    return alembic_cfg


def run_migrations(revision: str = "head", database_uri: Optional[str] = None) -> None:
    """Upgrade the database schema to the given revision.

    The migration environment drives its own event loop, so call this from a
    worker thread when an event loop is already running.
    """
    try:
        command.upgrade(get_alembic_config(database_uri), revision)
        logger.info(f"Database schema upgraded to {revision}")
    except Exception as e:
        logger.error(f"Failed to run migrations: {e}")
        raise


def downgrade(target: str = "-1", database_uri: Optional[str] = None) -> None:
    """Downgrade the database schema to a previous revision."""
    try:
        command.downgrade(get_alembic_config(database_uri), target)
        logger.info(f"Database schema downgraded to {target}")
    except Exception as e:
        logger.error(f"Failed to downgrade: {e}")
        raise


async def get_current_revision(engine: AsyncEngine) -> Optional[str]:
    """Return the revision stamped in the database, or None when unknown."""
    def _current(connection) -> Optional[str]:
        return MigrationContext.configure(connection).get_current_revision()

    try:
        async with engine.connect() as conn:
            return await conn.run_sync(_current)
    except Exception as e:
        logger.error(f"Failed to get current revision: {e}")
        return None
