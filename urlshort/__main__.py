"""Run the service with ``python -m urlshort``."""

import uvicorn

from urlshort.core.config import settings


def main() -> None:
    uvicorn.run(
        "urlshort.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_config=None,
    )


if __name__ == "__main__":
    main()
