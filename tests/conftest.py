"""Test fixtures for the URL shortener application."""

import os

# Settings are read at import time, so the environment must be in place first
os.environ["ENVIRONMENT"] = "testing"
os.environ["LOG_FILE_ENABLED"] = "false"
os.environ["REQUEST_LOGGING_ENABLED"] = "false"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlmodel import SQLModel

from urlshort.api.dependencies import get_base_url, get_click_tracker
from urlshort.db.base import make_session_factory
from urlshort.db.session import get_db
from urlshort.main import app as main_app
from urlshort.models.url import ShortURL  # noqa: F401  registers the table
from urlshort.repositories.url_repository import URLRepository
from urlshort.services.clicks import ClickTracker
from urlshort.services.shortener import ShortenedURLService
from tests.utils import TEST_BASE_URL


@pytest_asyncio.fixture
async def test_engine(tmp_path):
    """Create a file-backed SQLite engine with the schema in place.

    Background click updates run on their own connections, so the
    database is a file rather than a single shared in-memory connection.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path}/test.db", echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return make_session_factory(test_engine)


@pytest_asyncio.fixture
async def test_db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Session used directly by repository and service tests."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def click_tracker(session_factory):
    tracker = ClickTracker(session_factory)
    yield tracker
    await tracker.drain(timeout=5)


@pytest.fixture
def url_repository():
    return URLRepository()


@pytest.fixture
def shortener_service(url_repository, click_tracker):
    return ShortenedURLService(url_repository=url_repository, click_tracker=click_tracker)


@pytest.fixture
def app(session_factory, click_tracker) -> FastAPI:
    """The application with its database and click tracker pointed at the test engine."""

    async def _override_get_db():
        async with session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    main_app.dependency_overrides[get_db] = _override_get_db
    main_app.dependency_overrides[get_click_tracker] = lambda: click_tracker
    main_app.dependency_overrides[get_base_url] = lambda: TEST_BASE_URL
    yield main_app
    main_app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client talking to the app in-process; redirects are not followed."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac
