"""Exceptions for the URL shortener service layer.

Domain-specific exceptions that hide the underlying storage details from the
request handlers.
"""


class ServiceError(Exception):
    """Base exception for all service-level errors."""
    pass


class URLError(ServiceError):
    """Base exception for URL-related errors."""
    pass


class URLValidationError(URLError):
    """URL or custom code failed validation checks."""
    pass


class InvalidURLError(URLValidationError):
    """The URL format is invalid."""
    pass


class CustomCodeValidationError(URLValidationError):
    """The requested custom code doesn't meet requirements."""
    pass


class URLCreationError(URLError):
    """Error occurred during URL creation."""
    pass


class ShortCodeGenerationError(URLCreationError):
    """Every generated candidate collided with an existing code."""
    pass


class CodeSourceError(URLCreationError):
    """The random source used for short codes failed."""
    pass


class CodeAlreadyExistsError(URLCreationError):
    """The short code is already in use."""
    pass


class URLAlreadyShortenedError(CodeAlreadyExistsError):
    """The URL is already stored under a different short code."""

    def __init__(self, original_url: str, existing_code: str):
        self.original_url = original_url
        self.existing_code = existing_code
        super().__init__(f"URL already exists with code: {existing_code}")


class URLNotFoundError(URLError):
    """URL with the specified short code was not found."""
    pass


class StoreError(ServiceError):
    """The underlying store failed."""
    pass
