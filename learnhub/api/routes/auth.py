# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication API endpoints.

This module provides endpoints for user authentication:
- POST /signup - Register a student or instructor
- POST /login - Exchange email and password for a bearer token
- GET /me - Get current user profile

Example:
    POST /auth/login
    Body:
        {"email": "ada@example.com", "password": "secret1"}
"""

import logging

from fastapi import APIRouter, Request, status

from learnhub.api.dependencies import Auth, AuthenticatedUser
from learnhub.api.middleware.rate_limit import RATE_LIMIT_AUTH, limiter
from learnhub.models.auth import LoginRequest, LoginResponse, SignupRequest, UserResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/signup",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Sign up",
    description="Register a Student or Instructor account. Admin accounts cannot sign up.",
)
@limiter.limit(RATE_LIMIT_AUTH)
async def signup(
    request: Request,
    data: SignupRequest,
    auth_service: Auth,
) -> UserResponse:
    """Register a new account.

    Args:
        request: HTTP request (used for rate limiting).
        data: Signup data.
        auth_service: Authentication service.

    Returns:
        The created user.
    """
    logger.info("Signup attempt: role=%s", data.role)
    return await auth_service.signup(data)


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Log in",
    description="Authenticate with email and password and receive a bearer token.",
)
@limiter.limit(RATE_LIMIT_AUTH)
async def login(
    request: Request,
    data: LoginRequest,
    auth_service: Auth,
) -> LoginResponse:
    """Authenticate a user.

    Args:
        request: HTTP request (used for rate limiting).
        data: Login credentials.
        auth_service: Authentication service.

    Returns:
        Bearer token, its lifetime and the user's role.
    """
    return await auth_service.login(data)


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Get current user",
)
async def get_me(
    current_user: AuthenticatedUser,
    auth_service: Auth,
) -> UserResponse:
    """Get the profile of the authenticated user."""
    return await auth_service.get_profile(current_user.id)
