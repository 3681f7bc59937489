"""Routes package initialization.

This module exports the route collection for the application.
"""

from fastapi import APIRouter

from urlshort.api.routes import health, redirect, shortener

# Create root router
api_router = APIRouter()

api_router.include_router(health.router)
api_router.include_router(shortener.router)

# The catch-all /{code} route must stay last so it never shadows
# /health or /stats/{code}
api_router.include_router(redirect.router)

__all__ = ["api_router"]
