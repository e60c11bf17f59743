# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Mapping of domain errors to HTTP responses.

Services raise LearnHubError subclasses; this module turns each error
category into a status code with a ``{"detail": message}`` body.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from learnhub.core.errors import (
    ConflictError,
    ForbiddenError,
    LearnHubError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from learnhub.infrastructure.database.connection import DatabaseError

logger = logging.getLogger(__name__)

STATUS_CODES: list[tuple[type[LearnHubError], int]] = [
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (UnauthorizedError, status.HTTP_401_UNAUTHORIZED),
    (ForbiddenError, status.HTTP_403_FORBIDDEN),
]


def status_code_for(error: LearnHubError) -> int:
    """HTTP status code of a domain error."""
    for error_type, code in STATUS_CODES:
        if isinstance(error, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def learnhub_error_handler(request: Request, exc: LearnHubError) -> JSONResponse:
    """Render a domain error."""
    code = status_code_for(exc)
    if code >= 500:
        logger.error("Unhandled domain error on %s: %s", request.url.path, exc.message)
    else:
        logger.info("%s %s -> %d: %s", request.method, request.url.path, code, exc.message)

    headers = {"WWW-Authenticate": "Bearer"} if code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(status_code=code, content={"detail": exc.message}, headers=headers)


async def database_error_handler(request: Request, exc: DatabaseError) -> JSONResponse:
    """Render a store failure as a 500."""
    logger.error("Database error on %s: %s", request.url.path, str(exc))
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Database operation failed"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the domain and database error handlers on an app."""
    app.add_exception_handler(LearnHubError, learnhub_error_handler)
    app.add_exception_handler(DatabaseError, database_error_handler)
