# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI Application Factory.

This module provides the main application factory for the LearnHub API.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.middleware import SlowAPIMiddleware

from learnhub import __version__
from learnhub.api.admin import router as admin_router
from learnhub.api.dependencies import get_file_storage
from learnhub.api.errors import register_exception_handlers
from learnhub.api.middleware.auth import AuthMiddleware
from learnhub.api.middleware.rate_limit import limiter
from learnhub.api.middleware.request_context import RequestContextMiddleware
from learnhub.api.routes import general, health
from learnhub.api.static import UploadStaticFiles
from learnhub.api.student import router as student_router
from learnhub.core.config import get_settings
from learnhub.infrastructure.database import close_database, init_database
from learnhub.utils.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Startup configures logging, opens the database engine and makes sure
    the upload directory exists. Shutdown disposes the engine.

    Args:
        app: The FastAPI application instance.

    Yields:
        None during application runtime.
    """
    settings = get_settings()
    setup_logging(settings)
    logger.info(
        "Starting LearnHub API: environment=%s, debug=%s",
        settings.environment,
        settings.debug,
    )

    # =========================================================================
    # Startup
    # =========================================================================

    await init_database(settings)
    logger.info("Database connection initialized")

    get_file_storage().ensure_directory()
    logger.info("Upload directory ready: %s", settings.upload.directory)

    yield

    # =========================================================================
    # Shutdown
    # =========================================================================

    try:
        await close_database()
        logger.info("Database connection closed")
    except Exception as e:
        logger.warning("Error closing database connection: %s", str(e))

    logger.info("Shutting down LearnHub API")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    This factory function creates a new FastAPI instance with all
    middleware, routes, and configurations applied.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="LearnHub API",
        description="Online learning platform backend for tutors and students",
        version=__version__,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
        # No /path -> /path/ redirects; they drop the Authorization header
        redirect_slashes=False,
    )

    # =========================================================================
    # State
    # =========================================================================
    app.state.limiter = limiter

    # =========================================================================
    # Exception handlers
    # =========================================================================
    register_exception_handlers(app)

    # =========================================================================
    # Middleware (order matters - last added is first executed)
    # =========================================================================

    # Default per-client limit; needs the user id resolved by AuthMiddleware
    app.add_middleware(SlowAPIMiddleware)

    # Auth middleware - decodes the portal cookie or bearer token
    app.add_middleware(AuthMiddleware)

    # Request id and access log
    app.add_middleware(RequestContextMiddleware)

    # CORS middleware (should be last to execute first)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.origins_list,
        allow_credentials=settings.cors.allow_credentials,
        allow_methods=settings.cors.allow_methods,
        allow_headers=settings.cors.allow_headers,
    )

    # =========================================================================
    # Routes
    # =========================================================================
    app.include_router(health.router, tags=["Health"])
    app.include_router(general.router, prefix="/api", tags=["General"])
    app.include_router(admin_router)
    app.include_router(student_router)

    app.mount(
        settings.upload.url_prefix,
        UploadStaticFiles(directory=settings.upload.directory, check_dir=False),
        name="uploads",
    )

    return app
