"""Tests for the transaction decorator and database health check."""

import pytest
from unittest.mock import patch
from sqlalchemy import select
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from urlshort.db.base import DatabaseHealthCheck
from urlshort.db.session import db_transaction
from urlshort.models.url import ShortURL
from urlshort.repositories.base import RepositoryError


class Writer:

    @db_transaction()
    async def add(self, db, short_code, fail=False):
        db.add(ShortURL(original_url="https://example.com", short_code=short_code))
        await db.flush()
        if fail:
            raise RuntimeError("abort")
        return short_code


async def stored_codes(session_factory):
    async with session_factory() as fresh:
        result = await fresh.execute(select(ShortURL.short_code))
        return set(result.scalars().all())


@pytest.mark.asyncio
async def test_commits_on_success(test_db, session_factory):
    assert await Writer().add(test_db, "kept") == "kept"

    assert await stored_codes(session_factory) == {"kept"}


@pytest.mark.asyncio
async def test_rolls_back_on_error(test_db, session_factory):
    with pytest.raises(RuntimeError):
        await Writer().add(test_db, "dropped", fail=True)

    assert await stored_codes(session_factory) == set()


@pytest.mark.asyncio
async def test_session_passed_by_keyword(test_db, session_factory):
    await Writer().add(db=test_db, short_code="bykw")

    assert await stored_codes(session_factory) == {"bykw"}


@pytest.mark.asyncio
async def test_commit_failure_is_repository_error(test_db, session_factory):
    error = OperationalError("COMMIT", {}, Exception("disk I/O error"))
    with patch.object(test_db, "commit", side_effect=error):
        with pytest.raises(RepositoryError) as excinfo:
            await Writer().add(test_db, "uncommitted")

    assert "disk I/O error" in str(excinfo.value)
    assert await stored_codes(session_factory) == set()


class CommitFailed(Exception):
    pass


@pytest.mark.asyncio
async def test_commit_failure_uses_given_error(test_db):
    @db_transaction(commit_error=CommitFailed)
    async def touch(db):
        return "done"

    with patch.object(test_db, "commit", side_effect=SQLAlchemyError("lost")):
        with pytest.raises(CommitFailed):
            await touch(test_db)


@pytest.mark.asyncio
async def test_missing_session_argument():
    with pytest.raises(ValueError):
        await Writer().add(None, "nosession")


def test_decorated_function_needs_session_parameter():
    with pytest.raises(ValueError):
        @db_transaction()
        async def no_session(short_code):
            return short_code


@pytest.mark.asyncio
async def test_health_check(test_db):
    result = await DatabaseHealthCheck.check_connection(test_db)

    assert result["status"] == "healthy"
    assert result["error"] is None


@pytest.mark.asyncio
async def test_health_check_failure(test_db):
    with patch.object(test_db, "execute", side_effect=SQLAlchemyError("unreachable")):
        result = await DatabaseHealthCheck.check_connection(test_db)

    assert result["status"] == "unhealthy"
    assert "unreachable" in result["error"]
