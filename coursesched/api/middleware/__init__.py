# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API middleware: token authentication and rate limiting."""

from coursesched.api.middleware.auth import AuthMiddleware, CurrentUser, get_current_user
from coursesched.api.middleware.rate_limit import limiter

__all__ = [
    "AuthMiddleware",
    "CurrentUser",
    "get_current_user",
    "limiter",
]
