"""Database module for the URL shortener service."""
from urlshort.db.base import (
    DatabaseHealthCheck,
    async_session_factory,
    engine,
    get_engine,
    make_session_factory,
)
from urlshort.db.resilience import initialize_database_connection
from urlshort.db.session import db_transaction, get_db

__all__ = [
    "engine",
    "get_engine",
    "async_session_factory",
    "make_session_factory",
    "DatabaseHealthCheck",
    "get_db",
    "db_transaction",
    "initialize_database_connection",
]
