"""URL shortener data models.

This module defines the ShortURL table model and the URLStats read model.
"""
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ShortURLBase(SQLModel):
    """Base model for short URL data."""

    original_url: str = Field(
        index=True,
        description="The normalized original URL to redirect to"
    )
    short_code: str = Field(
        max_length=50,
        unique=True,
        index=True,
        description="Unique code for the shortened URL"
    )


class ShortURL(ShortURLBase, table=True):
    """
    Short URL model for storing shortened URLs in the database.

    Stores the mapping between a short code and its original URL along
    with the access statistics updated on each redirect.
    """

    __tablename__ = "urls"

    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_type=DateTime(timezone=True),
        description="Timestamp when this short URL was created"
    )
    last_accessed: Optional[datetime] = Field(
        default=None,
        sa_type=DateTime(timezone=True),
        description="Timestamp of the most recent redirect"
    )
    click_count: int = Field(
        default=0,
        sa_column_kwargs={"server_default": "0"},
        description="Counter for the number of redirects"
    )


class ShortURLCreate(ShortURLBase):
    """Schema for creating a new short URL."""
    pass


class URLStats(SQLModel):
    """Usage statistics for a short code."""
    short_code: str
    original_url: str
    created_at: datetime
    click_count: int = 0
    last_accessed: Optional[datetime] = None

    @classmethod
    def from_url(cls, url: ShortURL) -> "URLStats":
        return cls(
            short_code=url.short_code,
            original_url=url.original_url,
            created_at=url.created_at,
            click_count=url.click_count or 0,
            last_accessed=url.last_accessed,
        )
