"""Core module for the URL shortener service."""

from urlshort.core.config import settings

__all__ = ["settings"]
