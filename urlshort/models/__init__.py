"""
Data models for the URL shortener service.
"""

from urlshort.models.url import ShortURL, ShortURLBase, ShortURLCreate, URLStats

__all__ = [
    "ShortURL",
    "ShortURLBase",
    "ShortURLCreate",
    "URLStats",
]
