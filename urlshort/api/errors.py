"""Helpers for the structured {error, message} error bodies."""

from typing import Optional

from fastapi import HTTPException, status

INTERNAL_ERROR = "Internal server error"
DATABASE_FAILURE = "Database operation failed"


def api_error(status_code: int, error: str, message: Optional[str] = None) -> HTTPException:
    """Build an HTTPException whose detail is rendered as the response body."""
    detail = {"error": error}
    if message:
        detail["message"] = message
    return HTTPException(status_code=status_code, detail=detail)


def require_code(code: str) -> str:
    """Trim a path code, rejecting blank values with a 400."""
    code = code.strip()
    if not code:
        raise api_error(status.HTTP_400_BAD_REQUEST, "Invalid request", "Short code is required")
    return code


def not_found(message: str = "Short URL not found") -> HTTPException:
    return api_error(status.HTTP_404_NOT_FOUND, "Not found", message)


def store_failure() -> HTTPException:
    return api_error(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR, DATABASE_FAILURE)
