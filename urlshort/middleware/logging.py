"""
Request logging middleware for FastAPI using Loguru.

Every request gets an ID, exposed through the ``X-Request-ID`` response
header and bound as ``request_id`` on every log record emitted while the
request is handled, plus one access record at the REQUEST level once the
response is ready.
"""

import time
import uuid
from typing import Any, Dict

from fastapi import Request, Response
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware

from urlshort.core.logging import REQUEST_LEVEL, register_request_level

REQUEST_ID_HEADER = "X-Request-ID"


def client_ip(request: Request) -> str:
    """Client address, preferring the first X-Forwarded-For hop."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return request.client.host if request.client else "unknown"


class LoggingMiddleware(BaseHTTPMiddleware):
    """Access logging with request IDs and timing."""

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        start_time = time.perf_counter()
        with logger.contextualize(request_id=request_id):
            response = await call_next(request)

        response.headers[REQUEST_ID_HEADER] = request_id

        log_record: Dict[str, Any] = {
            "request_id": request_id,
            "client_ip": client_ip(request),
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "process_time_ms": round((time.perf_counter() - start_time) * 1000, 2),
        }
        if request.query_params:
            log_record["query_params"] = dict(request.query_params)

        logger.log(
            REQUEST_LEVEL,
            "{method} {path} {status_code} {process_time_ms}ms {client_ip} {request_id}",
            **log_record,
        )
        return response


def add_logging_middleware(app) -> None:
    """Add the request logging middleware to the FastAPI application."""
    register_request_level()
    app.add_middleware(LoggingMiddleware)
