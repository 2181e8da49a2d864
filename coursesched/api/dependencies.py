# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI dependency injection definitions.

This module provides dependency functions for FastAPI endpoints.
Dependencies are used to:
- Get database sessions
- Get authenticated users and enforce roles
- Get service instances

Example:
    @router.get("/notifications")
    async def list_notifications(
        service: NotificationService = Depends(get_notification_service),
        current_user: CurrentUser = Depends(require_auth),
    ):
        ...
"""

import logging
from functools import lru_cache
from typing import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from coursesched.api.middleware.auth import CurrentUser, get_current_user
from coursesched.core.config import get_settings
from coursesched.core.exceptions import ForbiddenError, UnauthenticatedError
from coursesched.domains.auth.jwt import TokenService
from coursesched.domains.auth.password import PasswordHasher
from coursesched.domains.auth.service import AuthService
from coursesched.domains.enrollment.load import EnrollmentLoadValidator
from coursesched.domains.enrollment.service import EnrollmentService
from coursesched.domains.notification.service import NotificationService
from coursesched.infrastructure.database.connection import get_session
from coursesched.models.common import Role

logger = logging.getLogger(__name__)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get a database session.

    Yields:
        AsyncSession for the scheduling store.
    """
    async with get_session() as session:
        yield session


@lru_cache(maxsize=1)
def get_token_service() -> TokenService:
    """Get the token service built from settings."""
    return TokenService(get_settings().jwt)


@lru_cache(maxsize=1)
def get_password_hasher() -> PasswordHasher:
    """Get the password hasher built from settings."""
    return PasswordHasher(rounds=get_settings().password.bcrypt_rounds)


# =========================================================================
# Authentication Dependencies
# =========================================================================


def require_auth(request: Request) -> CurrentUser:
    """Require authenticated user.

    Args:
        request: HTTP request.

    Returns:
        CurrentUser.

    Raises:
        UnauthenticatedError: If no token was sent or it did not verify.
    """
    user = get_current_user(request)
    if user is None:
        if not request.headers.get("Authorization"):
            raise UnauthenticatedError("No token provided")
        raise UnauthenticatedError("Invalid or expired token")
    return user


class RequireRole:
    """Dependency for requiring specific roles.

    Example:
        @router.delete("/users/{user_id}")
        async def delete_user(
            user: CurrentUser = Depends(RequireRole(Role.ADMIN)),
        ):
            ...
    """

    def __init__(self, *roles: Role, message: str = "Forbidden") -> None:
        """Initialize role requirement.

        Args:
            roles: Allowed roles (any of these).
            message: Error message when the role does not match.
        """
        self.roles = roles
        self.message = message

    def __call__(self, request: Request) -> CurrentUser:
        """Check roles and return user.

        Args:
            request: HTTP request.

        Returns:
            CurrentUser.

        Raises:
            UnauthenticatedError: If not authenticated.
            ForbiddenError: If the user has none of the roles.
        """
        user = require_auth(request)
        if not user.has_any_role(*self.roles):
            logger.info("Role %s denied; requires %s", user.role.value, self.roles)
            raise ForbiddenError(self.message)
        return user


require_admin = RequireRole(Role.ADMIN, message="Admin access required")
require_staff = RequireRole(Role.ADMIN, Role.INSTRUCTOR)


# =========================================================================
# Service Dependencies
# =========================================================================


def get_auth_service(
    db: AsyncSession = Depends(get_db),
    token_service: TokenService = Depends(get_token_service),
    password_hasher: PasswordHasher = Depends(get_password_hasher),
) -> AuthService:
    """Get the authentication service."""
    return AuthService(db, token_service, password_hasher)


def get_notification_service(db: AsyncSession = Depends(get_db)) -> NotificationService:
    """Get the notification service."""
    return NotificationService(db)


def get_load_validator(db: AsyncSession = Depends(get_db)) -> EnrollmentLoadValidator:
    """Get the enrollment load validator."""
    return EnrollmentLoadValidator(db)


def get_enrollment_service(db: AsyncSession = Depends(get_db)) -> EnrollmentService:
    """Get the enrollment service."""
    return EnrollmentService(db)
