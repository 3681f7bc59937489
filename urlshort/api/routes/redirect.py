"""Short code redirection endpoint."""

from fastapi import APIRouter, Depends, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.responses import RedirectResponse

from urlshort.api import schemas
from urlshort.api.dependencies import get_shortener_service
from urlshort.api.errors import not_found, require_code, store_failure
from urlshort.db.session import get_db
from urlshort.services.exceptions import StoreError, URLNotFoundError
from urlshort.services.shortener import ShortenedURLService

router = APIRouter(tags=["redirect"])


@router.get(
    "/{code}",
    response_class=RedirectResponse,
    status_code=status.HTTP_302_FOUND,
    responses={404: {"model": schemas.ErrorResponse, "description": "URL not found"}},
)
async def redirect_to_original_url(
    code: str,
    db: AsyncSession = Depends(get_db),
    shortener_service: ShortenedURLService = Depends(get_shortener_service),
):
    """Redirect to the original URL; the click is recorded in the background."""
    code = require_code(code)
    try:
        original_url = await shortener_service.get_original_url(db, code)
    except URLNotFoundError:
        raise not_found()
    except StoreError:
        raise store_failure()

    logger.bind(event_type="url_access", short_code=code).info(f"URL accessed: {code}")
    return RedirectResponse(url=original_url, status_code=status.HTTP_302_FOUND)
