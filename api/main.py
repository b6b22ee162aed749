#!/usr/bin/env python3
"""
Dormitory API - HTTP API layer for retreat dormitory assignment.

This is the FastAPI application behind the retreat admin dormitory screen.
It serves assignment previews; committing a preview is handled elsewhere.
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dormitory.logging_config import configure_logging, get_logger, resolve_level

from .settings import get_settings

# Configure unified logging format
# Format: 2026-01-06T14:05:52Z [api] LEVEL message
configure_logging(source="api", level=resolve_level(get_settings().log_level))
logger = get_logger(__name__)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    app = FastAPI(title=settings.app_name, description="Retreat dormitory assignment API")

    # CORS configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["*"],
    )

    # Register routers
    from .routers import dormitory

    app.include_router(dormitory.router)

    # Core endpoints (not in a router)
    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy", "service": "dormitory-api"}

    return app


# Create app instance for uvicorn
app = create_app()
