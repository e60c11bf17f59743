# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication request/response schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, EmailStr, Field


class SignupRequest(BaseModel):
    """Account registration request.

    ``role`` is validated by the auth service so an unsupported role
    yields a 400 rather than a schema error.
    """

    title: Literal["Mr", "Ms", "Mrs", "Other"] | None = Field(None, description="Salutation")
    first_name: str = Field(..., min_length=1, max_length=100, description="First name")
    last_name: str = Field(..., min_length=1, max_length=100, description="Last name")
    email: EmailStr = Field(..., description="Email address, used as username")
    password: str = Field(..., min_length=6, description="Password")
    role: str = Field(..., description="Student or Instructor")


class LoginRequest(BaseModel):
    """Login request."""

    email: EmailStr = Field(..., description="Email address")
    password: str = Field(..., min_length=1, description="Password")


class LoginResponse(BaseModel):
    """Login response carrying the bearer token."""

    role: str = Field(..., description="Role of the authenticated user")
    token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="Bearer", description="Token type")
    expires_in: int = Field(..., description="Access token expiration in seconds")
    user_id: str = Field(..., description="Authenticated user reference")


class UserResponse(BaseModel):
    """User profile response."""

    id: str = Field(..., description="User reference")
    email: str = Field(..., description="Email / username")
    role: str = Field(..., description="Student, Instructor or Admin")
    title: str | None = Field(None, description="Salutation")
    first_name: str | None = Field(None, description="First name")
    last_name: str | None = Field(None, description="Last name")
    status: str = Field(..., description="Active or Inactive, derived from last login")
    last_login: datetime | None = Field(None, description="Last login timestamp")
    course: str | None = Field(None, description="Enrolled course reference (students)")
    classroom: str | None = Field(None, description="Enrolled classroom reference (students)")
    created_at: datetime = Field(..., description="Account creation time")
