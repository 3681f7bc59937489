"""Repository layer for the URL shortener service.

Repository classes abstract database operations and implement the
Repository pattern for clean separation of concerns.
"""

from urlshort.repositories.base import (
    BaseRepository,
    DuplicateEntityError,
    RepositoryError,
)
from urlshort.repositories.url_repository import URLRepository

__all__ = [
    "BaseRepository",
    "RepositoryError",
    "DuplicateEntityError",
    "URLRepository",
]
