"""Session management for database operations.

This module provides the FastAPI session dependency and a decorator
that wraps service methods in a transaction.
"""

import inspect
import logging
from functools import wraps
from typing import AsyncGenerator, Callable, Type, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from urlshort.db.base import get_session
from urlshort.repositories.base import RepositoryError

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions.

    Yields:
        AsyncSession: A SQLAlchemy async session object.

    Example:
        ```python
        @router.get("/stats/{code}")
        async def get_stats(code: str, db: AsyncSession = Depends(get_db)):
            return await service.get_url_stats(db, code)
        ```
    """
    async with get_session() as session:
        try:
            yield session
        except SQLAlchemyError:
            logger.exception("Database error occurred")
            await session.rollback()
            raise
        except Exception:
            await session.rollback()
            raise


def db_transaction(
    db_param_name: str = "db",
    commit_error: Type[Exception] = RepositoryError,
) -> Callable:
    """Decorator to run a coroutine inside a database transaction.

    The session is looked up by parameter name in the call arguments. The
    transaction is committed when the wrapped coroutine returns and rolled
    back when it raises. A failed commit is raised as commit_error.

    Args:
        db_param_name: Name of the AsyncSession parameter.
        commit_error: Exception type raised when the commit itself fails.

    Example:
        ```python
        @db_transaction()
        async def delete_url(self, db: AsyncSession, short_code: str) -> None:
            ...
        ```
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        signature = inspect.signature(func)
        if db_param_name not in signature.parameters:
            raise ValueError(
                f"'{func.__name__}' has no parameter named '{db_param_name}'"
            )

        @wraps(func)
        async def wrapper(*args, **kwargs):
            bound = signature.bind_partial(*args, **kwargs)
            db = bound.arguments.get(db_param_name)
            if not isinstance(db, AsyncSession):
                raise ValueError(
                    f"Database session not found in arguments for '{func.__name__}'"
                )

            try:
                result = await func(*args, **kwargs)
            except Exception:
                await db.rollback()
                raise

            try:
                await db.commit()
            except SQLAlchemyError as e:
                logger.error(f"Commit failed in '{func.__name__}': {e}")
                await db.rollback()
                raise commit_error(f"Database error committing transaction: {e}") from e
            return result

        return wrapper
    return decorator
