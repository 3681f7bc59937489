"""URL Repository for the URL shortener service.

This module provides the URLRepository class for database operations on
ShortURL records. Lookups return None when nothing matches; every other
database failure is raised as RepositoryError.
"""

from typing import Any, Dict, Optional, Union

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from urlshort.models.url import ShortURL, ShortURLCreate
from urlshort.repositories.base import BaseRepository, DuplicateEntityError, RepositoryError


class URLRepository(BaseRepository[ShortURL, ShortURLCreate]):
    """
    Repository for ShortURL model database operations.
    """

    def __init__(self):
        super().__init__(ShortURL)

    async def create_short_url(
        self,
        db: AsyncSession,
        data: Union[ShortURLCreate, Dict[str, Any]]
    ) -> ShortURL:
        """
        Insert a new shortened URL.

        Raises:
            DuplicateEntityError: If the short code is already stored
            RepositoryError: On other database errors
        """
        try:
            return await self.create(db, data)
        except IntegrityError as e:
            if isinstance(data, ShortURLCreate):
                short_code = data.short_code
            else:
                short_code = data.get("short_code", "unknown")
            raise DuplicateEntityError(self.model_type, "short_code", short_code) from e

    async def get_by_short_code(self, db: AsyncSession, short_code: str) -> Optional[ShortURL]:
        """Find a URL by its short code."""
        try:
            query = select(self.model_type).where(self.model_type.short_code == short_code)
            result = await db.execute(query)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise RepositoryError(f"Error retrieving URL by short code: {e}") from e

    async def get_by_original_url(self, db: AsyncSession, original_url: str) -> Optional[ShortURL]:
        """Find the record already holding this (normalized) original URL."""
        try:
            query = (
                select(self.model_type)
                .where(self.model_type.original_url == original_url)
                .order_by(self.model_type.id)
                .limit(1)
            )
            result = await db.execute(query)
            return result.scalars().first()
        except SQLAlchemyError as e:
            raise RepositoryError(f"Error retrieving URL by original URL: {e}") from e

    async def check_short_code_exists(self, db: AsyncSession, short_code: str) -> bool:
        """Check if a short code is already in use."""
        return await self.exists(db, short_code=short_code)

    async def record_access(self, db: AsyncSession, url_id: int) -> int:
        """
        Increment the click count and stamp last_accessed for a URL.

        Uses a single UPDATE so concurrent redirects never lose increments.

        Returns:
            Number of rows updated (0 if the URL was deleted meanwhile)
        """
        try:
            stmt = (
                update(self.model_type)
                .where(self.model_type.id == url_id)
                .values(
                    click_count=func.coalesce(self.model_type.click_count, 0) + 1,
                    last_accessed=func.current_timestamp(),
                )
                .execution_options(synchronize_session=False)
            )
            result = await db.execute(stmt)
            return result.rowcount
        except SQLAlchemyError as e:
            raise RepositoryError(f"Error recording access: {e}") from e

    async def delete_by_short_code(self, db: AsyncSession, short_code: str) -> int:
        """
        Delete the URL with this short code.

        Returns:
            Number of rows deleted
        """
        try:
            stmt = delete(self.model_type).where(self.model_type.short_code == short_code)
            result = await db.execute(stmt)
            return result.rowcount
        except SQLAlchemyError as e:
            raise RepositoryError(f"Error deleting URL by short code: {e}") from e
