from fastapi import APIRouter, Depends, Path, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from urlshort.api import schemas
from urlshort.api.dependencies import get_base_url, get_shortener_service
from urlshort.api.errors import api_error, not_found, require_code, store_failure
from urlshort.db.session import get_db
from urlshort.services.codes import normalize_url
from urlshort.services.exceptions import (
    CodeAlreadyExistsError,
    CodeSourceError,
    CustomCodeValidationError,
    InvalidURLError,
    ShortCodeGenerationError,
    StoreError,
    URLAlreadyShortenedError,
    URLNotFoundError,
)
from urlshort.services.shortener import ShortenedURLService

router = APIRouter(tags=["shortener"])

ERROR_RESPONSES = {
    400: {"model": schemas.ErrorResponse, "description": "Invalid input"},
    500: {"model": schemas.ErrorResponse, "description": "Internal error"},
}


def _shorten_response(base_url: str, original_url: str, code: str) -> schemas.ShortenResponse:
    return schemas.ShortenResponse(
        short_url=f"{base_url}/{code}",
        original_url=normalize_url(original_url),
        code=code,
    )


@router.post(
    "/shorten",
    response_model=schemas.ShortenResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
)
async def shorten_url(
    payload: schemas.ShortenRequest,
    db: AsyncSession = Depends(get_db),
    shortener_service: ShortenedURLService = Depends(get_shortener_service),
    base_url: str = Depends(get_base_url),
):
    url = payload.url.strip()
    if not url:
        raise api_error(status.HTTP_400_BAD_REQUEST, "Invalid input", "URL cannot be empty")

    try:
        code = await shortener_service.create_short_url(db=db, original_url=url)
    except InvalidURLError:
        raise api_error(status.HTTP_400_BAD_REQUEST, "Invalid URL", "Please provide a valid URL format")
    except (ShortCodeGenerationError, CodeSourceError) as e:
        logger.error("Short code generation failed", error=str(e))
        raise api_error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Service temporarily unavailable",
            "Failed to generate unique code, please try again",
        )
    except CodeAlreadyExistsError:
        raise api_error(
            status.HTTP_409_CONFLICT,
            "Code already exists",
            "The generated code was claimed concurrently, please try again",
        )
    except StoreError:
        raise store_failure()

    return _shorten_response(base_url, url, code)


@router.post(
    "/shorten/custom",
    response_model=schemas.ShortenResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        **ERROR_RESPONSES,
        409: {"model": schemas.ErrorResponse, "description": "Custom code or URL already in use"},
    },
)
async def shorten_url_with_custom_code(
    payload: schemas.CustomShortenRequest,
    db: AsyncSession = Depends(get_db),
    shortener_service: ShortenedURLService = Depends(get_shortener_service),
    base_url: str = Depends(get_base_url),
):
    url = payload.url.strip()
    custom_code = payload.custom_code.strip()
    if not url or not custom_code:
        raise api_error(
            status.HTTP_400_BAD_REQUEST, "Invalid input", "URL and custom code cannot be empty"
        )

    try:
        code = await shortener_service.create_short_url_with_custom_code(
            db=db, original_url=url, custom_code=custom_code
        )
    except InvalidURLError:
        raise api_error(status.HTTP_400_BAD_REQUEST, "Invalid URL", "Please provide a valid URL format")
    except CustomCodeValidationError as e:
        raise api_error(status.HTTP_400_BAD_REQUEST, "Invalid custom code", str(e))
    except URLAlreadyShortenedError as e:
        raise api_error(status.HTTP_409_CONFLICT, "URL already shortened", str(e))
    except CodeAlreadyExistsError:
        raise api_error(
            status.HTTP_409_CONFLICT,
            "Code already exists",
            f"The custom code '{custom_code}' is already in use. Please choose a different code.",
        )
    except StoreError:
        raise store_failure()

    return _shorten_response(base_url, url, code)


@router.get(
    "/stats/{code}",
    response_model=schemas.URLStatsResponse,
    response_model_exclude_none=True,
    responses={404: {"model": schemas.ErrorResponse, "description": "URL not found"}},
)
async def get_url_stats(
    code: str = Path(..., description="The short code of the URL"),
    db: AsyncSession = Depends(get_db),
    shortener_service: ShortenedURLService = Depends(get_shortener_service),
):
    code = require_code(code)
    try:
        return await shortener_service.get_url_stats(db, code)
    except URLNotFoundError:
        raise not_found()
    except StoreError:
        raise store_failure()


@router.delete(
    "/delete/{code}",
    response_model=schemas.MessageResponse,
    responses={404: {"model": schemas.ErrorResponse, "description": "URL not found"}},
)
async def delete_url(
    code: str = Path(..., description="The short code of the URL"),
    db: AsyncSession = Depends(get_db),
    shortener_service: ShortenedURLService = Depends(get_shortener_service),
):
    code = require_code(code)
    try:
        await shortener_service.delete_url(db, code)
    except URLNotFoundError:
        raise not_found()
    except StoreError:
        raise store_failure()

    return schemas.MessageResponse(message="Short URL deleted successfully")

