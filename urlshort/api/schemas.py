"""API request and response schemas.

Pydantic models for request validation and response serialization.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class ShortenRequest(BaseModel):
    """Request schema for shortening a URL with a generated code."""
    url: str


class CustomShortenRequest(BaseModel):
    """Request schema for shortening a URL with a custom code."""
    url: str
    custom_code: str


class ShortenResponse(BaseModel):
    """Response schema for a created short URL."""
    short_url: str
    original_url: str
    code: str


class URLStatsResponse(BaseModel):
    """Response schema for URL statistics."""
    short_code: str
    original_url: str
    created_at: datetime
    click_count: int
    last_accessed: Optional[datetime] = None

    class Config:
        from_attributes = True


class MessageResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    status: str
    service: str


class ErrorResponse(BaseModel):
    """Response schema for errors."""
    error: str
    message: Optional[str] = None
