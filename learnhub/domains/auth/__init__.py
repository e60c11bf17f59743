# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication domain: tokens, passwords, identities and accounts."""

from learnhub.domains.auth.identity import CurrentUser
from learnhub.domains.auth.jwt import (
    InvalidTokenError,
    JWTError,
    JWTManager,
    TokenExpiredError,
    TokenPayload,
)
from learnhub.domains.auth.password import PasswordHasher

__all__ = [
    "CurrentUser",
    "JWTManager",
    "TokenPayload",
    "JWTError",
    "TokenExpiredError",
    "InvalidTokenError",
    "PasswordHasher",
]
