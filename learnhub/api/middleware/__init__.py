# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API middleware: authentication and rate limiting."""

from learnhub.api.middleware.auth import AuthMiddleware, get_current_user
from learnhub.api.middleware.rate_limit import limiter, rate_limit_exceeded_handler

__all__ = ["AuthMiddleware", "get_current_user", "limiter", "rate_limit_exceeded_handler"]
