"""Main application module.

This module initializes the FastAPI application, includes routes,
and configures middleware and exception handlers.
"""

import asyncio
import sys

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from urlshort.api import api_router
from urlshort.api.errors import INTERNAL_ERROR
from urlshort.core.config import settings
from urlshort.core.logging import setup_logging
from urlshort.core.migrations import run_migrations
from urlshort.db import async_session_factory, engine, initialize_database_connection
from urlshort.middleware import add_logging_middleware
from urlshort.services.clicks import ClickTracker

# Setup logging
logger = setup_logging()

app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
)

# Background click recording shares the application's session factory
app.state.click_tracker = ClickTracker(async_session_factory)

if settings.REQUEST_LOGGING_ENABLED:
    add_logging_middleware(app)

app.include_router(api_router)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    if isinstance(exc.detail, dict):
        content = exc.detail
    else:
        content = {"error": str(exc.detail)}
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are reported as 400 with the first problem."""
    errors = exc.errors()
    logger.warning(f"Request validation error on {request.method} {request.url.path}: {errors}")
    message = "Invalid request body"
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
    return JSONResponse(status_code=400, content={"error": "Invalid input", "message": message})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler to catch and log all unhandled exceptions."""
    logger.bind(
        url=str(request.url),
        client_host=request.client.host if request.client else None,
    ).opt(exception=exc).error(f"Unhandled exception in {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={
            "error": INTERNAL_ERROR,
            "message": str(exc) if settings.DEBUG else "An unexpected error occurred",
        },
    )


@app.on_event("startup")
async def startup_event():
    """Run startup tasks."""
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Debug mode: {settings.DEBUG}")

    logger.info("Initializing database connection with retry")
    if not await initialize_database_connection(engine):
        logger.critical("Failed to connect to database after multiple attempts")
        sys.exit(1)
    logger.info("Database connection established successfully")

    if settings.DB_AUTO_MIGRATE:
        logger.info("Applying database migrations")
        await asyncio.to_thread(run_migrations)


@app.on_event("shutdown")
async def shutdown_event():
    """Run cleanup tasks."""
    logger.info(f"Shutting down {settings.APP_NAME}")

    tracker: ClickTracker = app.state.click_tracker
    if tracker.pending:
        logger.info(f"Waiting for {tracker.pending} pending click updates")
    await tracker.drain(settings.CLICK_DRAIN_TIMEOUT)

    await engine.dispose()
    logger.info("Database connections closed")
