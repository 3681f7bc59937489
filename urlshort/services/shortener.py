"""URL shortening service for the URL shortener.

This module contains the ShortenedURLService class which implements the
business logic for creating, resolving, inspecting and deleting short URLs.
"""

import logging
from typing import Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from urlshort.core.config import settings
from urlshort.db.session import db_transaction
from urlshort.models.url import URLStats
from urlshort.repositories.base import DuplicateEntityError, RepositoryError
from urlshort.repositories.url_repository import URLRepository
from urlshort.services.clicks import ClickTracker
from urlshort.services.codes import (
    generate_code,
    normalize_url,
    validate_custom_code,
    validate_url,
)
from urlshort.services.exceptions import (
    CodeAlreadyExistsError,
    ShortCodeGenerationError,
    StoreError,
    URLAlreadyShortenedError,
    URLNotFoundError,
)

logger = logging.getLogger(__name__)


class ShortenedURLService:
    """
    Service for URL shortening business logic.

    Uniqueness of short codes is ultimately enforced by the database; a
    constraint violation at insert time is reported as CodeAlreadyExistsError.
    """

    def __init__(
        self,
        url_repository: URLRepository,
        click_tracker: ClickTracker,
        code_generator: Callable[[int], str] = generate_code,
        code_length: Optional[int] = None,
        max_attempts: Optional[int] = None,
    ):
        """
        Initialize the URL shortening service.

        Args:
            url_repository: Repository for URL data access
            click_tracker: Background worker applying access statistics
            code_generator: Produces a random code of the requested length
            code_length: Length of generated codes
            max_attempts: Candidates tried before giving up
        """
        self.url_repository = url_repository
        self.click_tracker = click_tracker
        self.code_generator = code_generator
        self.code_length = code_length or settings.URL_CODE_LENGTH
        self.max_attempts = max_attempts or settings.URL_CODE_MAX_ATTEMPTS

    @db_transaction(commit_error=StoreError)
    async def create_short_url(self, db: AsyncSession, original_url: str) -> str:
        """
        Shorten a URL with a generated code.

        Shortening a URL that is already stored returns its existing code.

        Returns:
            str: The short code

        Raises:
            InvalidURLError: If URL format is invalid
            ShortCodeGenerationError: If every candidate code was taken
            CodeSourceError: If the random source failed
            CodeAlreadyExistsError: If a concurrent insert claimed the code
            StoreError: On database failures
        """
        validate_url(original_url)
        normalized_url = normalize_url(original_url)

        try:
            existing = await self.url_repository.get_by_original_url(db, normalized_url)
            if existing is not None:
                return existing.short_code

            short_code = await self._generate_unique_short_code(db)

            await self.url_repository.create_short_url(
                db, {"original_url": normalized_url, "short_code": short_code}
            )
        except DuplicateEntityError as e:
            logger.warning(f"Lost insert race for generated code: {e}")
            raise CodeAlreadyExistsError(str(e)) from e
        except RepositoryError as e:
            logger.error(f"Error creating short URL: {e}")
            raise StoreError(str(e)) from e

        logger.info(f"Created short code {short_code} for {normalized_url}")
        return short_code

    @db_transaction(commit_error=StoreError)
    async def create_short_url_with_custom_code(
        self,
        db: AsyncSession,
        original_url: str,
        custom_code: str
    ) -> str:
        """
        Shorten a URL under a caller-chosen code.

        Unlike create_short_url, a URL that is already stored under another
        code is a conflict rather than a success.

        Returns:
            str: The custom code

        Raises:
            InvalidURLError: If URL format is invalid
            CustomCodeValidationError: If the custom code breaks a rule
            CodeAlreadyExistsError: If the custom code is taken
            URLAlreadyShortenedError: If the URL already has a code
            StoreError: On database failures
        """
        validate_url(original_url)
        validate_custom_code(custom_code)
        normalized_url = normalize_url(original_url)

        try:
            if await self.url_repository.check_short_code_exists(db, custom_code):
                raise CodeAlreadyExistsError(f"Custom code '{custom_code}' is already in use")

            existing = await self.url_repository.get_by_original_url(db, normalized_url)
            if existing is not None:
                raise URLAlreadyShortenedError(normalized_url, existing.short_code)

            await self.url_repository.create_short_url(
                db, {"original_url": normalized_url, "short_code": custom_code}
            )
        except DuplicateEntityError as e:
            raise CodeAlreadyExistsError(f"Custom code '{custom_code}' is already in use") from e
        except RepositoryError as e:
            logger.error(f"Error creating custom short URL: {e}")
            raise StoreError(str(e)) from e

        logger.info(f"Created custom code {custom_code} for {normalized_url}")
        return custom_code

    async def get_original_url(self, db: AsyncSession, short_code: str) -> str:
        """
        Resolve a short code for redirection.

        The click statistics are updated by the click tracker in the
        background; this method never waits for that update.

        Raises:
            URLNotFoundError: If the code is empty or unknown
            StoreError: On database failures
        """
        if not short_code:
            raise URLNotFoundError("Short code is required")

        try:
            url = await self.url_repository.get_by_short_code(db, short_code)
        except RepositoryError as e:
            logger.error(f"Error retrieving URL for redirect: {e}")
            raise StoreError(str(e)) from e

        if url is None:
            raise URLNotFoundError(f"URL with code '{short_code}' not found")

        self.click_tracker.schedule(url.id)
        return url.original_url

    async def get_url_stats(self, db: AsyncSession, short_code: str) -> URLStats:
        """
        Get usage statistics for a short code.

        Raises:
            URLNotFoundError: If the code is empty or unknown
            StoreError: On database failures
        """
        if not short_code:
            raise URLNotFoundError("Short code is required")

        try:
            url = await self.url_repository.get_by_short_code(db, short_code)
        except RepositoryError as e:
            logger.error(f"Error retrieving URL stats: {e}")
            raise StoreError(str(e)) from e

        if url is None:
            raise URLNotFoundError(f"URL with code '{short_code}' not found")

        return URLStats.from_url(url)

    @db_transaction(commit_error=StoreError)
    async def delete_url(self, db: AsyncSession, short_code: str) -> None:
        """
        Delete a shortened URL by its code.

        Raises:
            URLNotFoundError: If the code is empty or nothing was deleted
            StoreError: On database failures
        """
        if not short_code:
            raise URLNotFoundError("Short code is required")

        try:
            deleted = await self.url_repository.delete_by_short_code(db, short_code)
        except RepositoryError as e:
            logger.error(f"Error deleting URL: {e}")
            raise StoreError(str(e)) from e

        if not deleted:
            raise URLNotFoundError(f"URL with code '{short_code}' not found")

        logger.info(f"Deleted short code {short_code}")

    async def _generate_unique_short_code(self, db: AsyncSession) -> str:
        """
        Generate a short code that isn't already in use.

        Raises:
            ShortCodeGenerationError: If every attempt produced a taken code
        """
        for attempt in range(1, self.max_attempts + 1):
            candidate = self.code_generator(self.code_length)
            if not await self.url_repository.check_short_code_exists(db, candidate):
                return candidate
            logger.debug(f"Short code collision on attempt {attempt}: {candidate}")

        raise ShortCodeGenerationError(
            f"Failed to generate unique code after {self.max_attempts} attempts"
        )
