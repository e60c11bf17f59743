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
from slowapi.errors import RateLimitExceeded

from learnhub import __version__
from learnhub.api.dependencies import close_db, get_password_hasher, init_db
from learnhub.api.errors import register_exception_handlers
from learnhub.api.middleware.auth import AuthMiddleware
from learnhub.api.middleware.rate_limit import limiter, rate_limit_exceeded_handler
from learnhub.api.routes import health
from learnhub.api.routes import router as api_router
from learnhub.core.config import get_settings
from learnhub.infrastructure.database.connection import DatabaseError, get_session
from learnhub.infrastructure.database.seeds import seed_admin
from learnhub.utils.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Handles startup and shutdown events for the application:
    - Database connection pool and schema
    - Admin account seed

    Args:
        app: The FastAPI application instance.

    Yields:
        None during application runtime.
    """
    settings = get_settings()
    logger.info(
        "Starting LearnHub API",
        extra={"environment": settings.environment, "debug": settings.debug},
    )

    # =========================================================================
    # Startup
    # =========================================================================

    try:
        await init_db()
        logger.info("Database initialized")
    except DatabaseError as e:
        logger.warning("Failed to initialize database: %s", str(e))

    if settings.auth.admin_email and settings.auth.admin_password is not None:
        try:
            async with get_session() as session:
                await seed_admin(
                    session,
                    settings.auth.admin_email,
                    settings.auth.admin_password.get_secret_value(),
                    get_password_hasher(),
                )
        except DatabaseError as e:
            logger.warning("Failed to seed admin account: %s", str(e))

    yield

    # =========================================================================
    # Shutdown
    # =========================================================================

    try:
        await close_db()
        logger.info("Database connections closed")
    except DatabaseError as e:
        logger.warning("Error closing database connections: %s", str(e))

    logger.info("Shutting down LearnHub API")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()
    setup_logging(settings)

    app = FastAPI(
        title="LearnHub API",
        description="Lessons, courses, classrooms, enrollment and grading",
        version=__version__,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
        # Avoid 307 redirects that drop the Authorization header
        redirect_slashes=False,
    )

    # =========================================================================
    # State
    # =========================================================================
    app.state.limiter = limiter

    # =========================================================================
    # Exception handlers
    # =========================================================================
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    register_exception_handlers(app)

    # =========================================================================
    # Middleware (order matters - last added is first executed)
    # =========================================================================
    app.add_middleware(AuthMiddleware)

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
    app.include_router(api_router)

    return app
