# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Rate limiting using slowapi.

Rate limits are applied per client: the user ID when authenticated,
otherwise the IP address. Login and registration are limited per IP.

Example:
    @limiter.limit(auth_rate_limit, key_func=get_ip_only)
    async def login(request: Request, ...):
        ...
"""

import logging

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from coursesched.core.config import get_settings

logger = logging.getLogger(__name__)


def get_client_identifier(request: Request) -> str:
    """Get a unique identifier for the client.

    Uses user ID if authenticated, otherwise uses IP address.

    Args:
        request: HTTP request.

    Returns:
        Client identifier string.
    """
    user = getattr(request.state, "user", None)
    if user:
        return f"user:{user.id}"
    return f"ip:{get_remote_address(request)}"


def get_ip_only(request: Request) -> str:
    """Get client IP address only.

    Used for login endpoints where user is not yet authenticated.

    Args:
        request: HTTP request.

    Returns:
        IP address string.
    """
    return get_remote_address(request)


def auth_rate_limit() -> str:
    """Limit for login and registration, read from settings on each request."""
    return f"{get_settings().rate_limit.auth_per_minute}/minute"


settings = get_settings()

limiter = Limiter(
    key_func=get_client_identifier,
    default_limits=[f"{settings.rate_limit.requests_per_minute}/minute"],
    storage_uri=settings.rate_limit.storage_uri,
    enabled=settings.rate_limit.enabled,
)

if not settings.rate_limit.enabled:
    logger.info("Rate limiting disabled")
