"""API dependencies for FastAPI.

Dependency providers giving endpoints access to services and settings.
"""

from fastapi import Depends, Request

from urlshort.core.config import settings
from urlshort.repositories.url_repository import URLRepository
from urlshort.services.clicks import ClickTracker
from urlshort.services.shortener import ShortenedURLService


async def get_url_repository() -> URLRepository:
    """Get an instance of the URL repository."""
    return URLRepository()


def get_click_tracker(request: Request) -> ClickTracker:
    """The process-wide click tracker created at application start."""
    return request.app.state.click_tracker


async def get_shortener_service(
    url_repo: URLRepository = Depends(get_url_repository),
    click_tracker: ClickTracker = Depends(get_click_tracker),
) -> ShortenedURLService:
    """Get an instance of the URL shortening service."""
    return ShortenedURLService(url_repository=url_repo, click_tracker=click_tracker)


def get_base_url() -> str:
    """Get the base URL for shortened links."""
    return settings.BASE_URL
