# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Configuration package for LearnHub.

Example:
    >>> from learnhub.core.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.jwt.algorithm)
    'HS256'
"""

from learnhub.core.config.settings import (
    APISettings,
    AuthSettings,
    CORSSettings,
    DatabaseSettings,
    GradingSettings,
    JWTSettings,
    RateLimitSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    "clear_settings_cache",
    # Subsettings
    "DatabaseSettings",
    "JWTSettings",
    "AuthSettings",
    "GradingSettings",
    "RateLimitSettings",
    "CORSSettings",
    "APISettings",
]
