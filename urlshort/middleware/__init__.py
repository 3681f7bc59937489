"""HTTP middleware for the URL shortener service."""

from urlshort.middleware.logging import LoggingMiddleware, add_logging_middleware

__all__ = ["LoggingMiddleware", "add_logging_middleware"]
