"""Short code generation and input validation.

Generated codes come from the operating system CSPRNG. Custom codes and
URLs are validated here before the service touches the database.
"""

import re
import secrets
import string
from urllib.parse import urlsplit

from pydantic import AnyHttpUrl, TypeAdapter, ValidationError

from urlshort.services.exceptions import (
    CodeSourceError,
    CustomCodeValidationError,
    InvalidURLError,
)

CODE_ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits

MIN_CUSTOM_CODE_LENGTH = 3
MAX_CUSTOM_CODE_LENGTH = 50

RESERVED_WORDS = frozenset({"api", "admin", "www", "app", "mail", "ftp", "localhost"})

SCHEME_PREFIXES = ("http://", "https://")

_CUSTOM_CODE_PATTERN = re.compile(r"[A-Za-z0-9_-]+")
_url_adapter = TypeAdapter(AnyHttpUrl)

# A percent sign must start a two-digit hex escape
_BAD_ESCAPE_PATTERN = re.compile(r"%(?![0-9A-Fa-f]{2})")


def generate_code(length: int) -> str:
    """
    Generate a random short code of the given length.

    Each random byte is mapped onto the 62-character alphabet by modulo.

    Raises:
        CodeSourceError: If the random source fails
    """
    try:
        raw = secrets.token_bytes(length)
    except (OSError, NotImplementedError) as e:
        raise CodeSourceError(f"Failed to generate random bytes: {e}") from e

    return "".join(CODE_ALPHABET[b % len(CODE_ALPHABET)] for b in raw)


def normalize_url(raw: str) -> str:
    """Return the canonical stored form: https:// is prepended when no scheme is present."""
    if raw.startswith(SCHEME_PREFIXES):
        return raw
    return "https://" + raw


def validate_url(raw: str) -> None:
    """
    Check that the URL (after normalization) is an absolute http(s) URL with a host.

    Raises:
        InvalidURLError: If the URL is empty or cannot be parsed
    """
    if not raw:
        raise InvalidURLError("URL cannot be empty")

    normalized = normalize_url(raw)
    if _BAD_ESCAPE_PATTERN.search(normalized):
        raise InvalidURLError(f"Invalid URL format: {raw}: invalid URL escape")
    try:
        host = urlsplit(normalized).hostname or ""
    except ValueError as e:
        raise InvalidURLError(f"Invalid URL format: {raw}") from e
    if "%" in host:
        raise InvalidURLError(f"Invalid URL format: {raw}: escape in host")

    try:
        parsed = _url_adapter.validate_python(normalized)
    except ValidationError as e:
        raise InvalidURLError(f"Invalid URL format: {raw}") from e

    if not parsed.host:
        raise InvalidURLError(f"Invalid URL format: {raw}")


def validate_custom_code(code: str) -> None:
    """
    Check a caller-supplied short code.

    Raises:
        CustomCodeValidationError: With a message naming the failed rule
    """
    if not MIN_CUSTOM_CODE_LENGTH <= len(code) <= MAX_CUSTOM_CODE_LENGTH:
        raise CustomCodeValidationError(
            f"invalid custom code format: length must be between "
            f"{MIN_CUSTOM_CODE_LENGTH} and {MAX_CUSTOM_CODE_LENGTH} characters"
        )

    if not _CUSTOM_CODE_PATTERN.fullmatch(code):
        raise CustomCodeValidationError(
            "invalid custom code format: only alphanumeric characters, "
            "hyphens, and underscores allowed"
        )

    if code.lower() in RESERVED_WORDS:
        raise CustomCodeValidationError(
            f"invalid custom code format: '{code}' is a reserved word"
        )
