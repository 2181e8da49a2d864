# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Configuration package for the course scheduling service.

Example:
    >>> from coursesched.core.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.environment)
    'development'
"""

from coursesched.core.config.settings import (
    DEFAULT_JWT_SECRET,
    CORSSettings,
    DatabaseSettings,
    JWTSettings,
    PasswordSettings,
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
    "PasswordSettings",
    "RateLimitSettings",
    "CORSSettings",
    "DEFAULT_JWT_SECRET",
]
