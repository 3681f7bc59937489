"""Service layer for the URL shortener.

Services implement the business logic and orchestrate the repositories.
"""

from urlshort.services.clicks import ClickTracker
from urlshort.services.shortener import ShortenedURLService

__all__ = ["ClickTracker", "ShortenedURLService"]
