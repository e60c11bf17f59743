# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Rate limiting using slowapi.

Limits are applied per client: the user id when authenticated, the IP
address otherwise. Only the credential endpoints are limited.

Example:
    @router.post("/login")
    @limiter.limit(RATE_LIMIT_AUTH)
    async def login(request: Request, ...):
        ...
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from learnhub.core.config import get_settings

logger = logging.getLogger(__name__)


def get_client_identifier(request: Request) -> str:
    """Get a unique identifier for the client.

    Uses user ID if authenticated, otherwise uses IP address.
    """
    user = getattr(request.state, "user", None)
    if user:
        return f"user:{user.id}"
    return f"ip:{get_remote_address(request)}"


settings = get_settings()
limiter = Limiter(
    key_func=get_client_identifier,
    storage_uri=settings.rate_limit.storage_uri,
    enabled=settings.rate_limit.enabled,
)

RATE_LIMIT_AUTH = settings.rate_limit.auth_limit


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Handle rate limit exceeded errors with a 429 response."""
    logger.warning(
        "Rate limit exceeded: %s for %s",
        exc.detail,
        get_client_identifier(request),
    )

    return JSONResponse(
        status_code=429,
        content={"detail": "Too many requests. Please try again later."},
    )
