"""Test utilities for URL shortener tests."""

import random
import string
from typing import Any, Dict, Optional

from urlshort.models.url import ShortURL

TEST_BASE_URL = "http://sho.rt"


def random_string(length: int = 10) -> str:
    """Generate a random alphanumeric string."""
    return ''.join(random.choice(string.ascii_letters + string.digits) for _ in range(length))


def random_url() -> str:
    """Generate a random URL for testing."""
    domain = f"{random_string(8).lower()}.com"
    path = random_string(12)
    return f"https://{domain}/{path}"


def create_test_url_data(
    original_url: Optional[str] = None,
    short_code: Optional[str] = None,
    click_count: int = 0
) -> Dict[str, Any]:
    """Create test data dict for a ShortURL."""
    return {
        "original_url": original_url or random_url(),
        "short_code": short_code or random_string(6),
        "click_count": click_count
    }


async def create_test_url(
    db,
    original_url: Optional[str] = None,
    short_code: Optional[str] = None,
    click_count: int = 0
) -> ShortURL:
    """Create and commit a test ShortURL."""
    url = ShortURL(**create_test_url_data(
        original_url=original_url,
        short_code=short_code,
        click_count=click_count
    ))
    db.add(url)
    await db.commit()
    await db.refresh(url)
    return url
