# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication API endpoints.

This module provides endpoints for user authentication:
- POST /login - Exchange email and password for a token
- POST /register - Create a user with its role profile
- GET /me - Get current user info
- PUT /password - Change the current user's password
- DELETE /users/{user_id} - Delete a user (admin)

Example:
    POST /api/v1/auth/login
    Body:
        {"email": "student@school.edu", "password": "..."}
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Body, Depends, Request, status

from coursesched.api.dependencies import get_auth_service, require_admin, require_auth
from coursesched.api.middleware.auth import CurrentUser
from coursesched.api.middleware.rate_limit import auth_rate_limit, get_ip_only, limiter
from coursesched.core.exceptions import NotFoundError, ServiceError
from coursesched.domains.auth.service import AuthService
from coursesched.models.auth import (
    AuthResult,
    ChangePasswordRequest,
    LoginRequest,
    RegistrationVariant,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _raise_on_failure(result: AuthResult) -> AuthResult:
    """Turn a failed AuthResult into a ServiceError for the error handler."""
    if not result.success:
        raise ServiceError(result.message or "Request failed", code=result.reason)
    return result


@router.post(
    "/login",
    response_model=AuthResult,
    response_model_exclude_none=True,
    summary="Log in with email and password",
)
@limiter.limit(auth_rate_limit, key_func=get_ip_only)
async def login(
    request: Request,
    data: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResult:
    """Authenticate and return a token.

    Args:
        request: HTTP request (used for rate limiting).
        data: Login credentials.
        auth_service: Authentication service.

    Returns:
        AuthResult with the user and token.
    """
    return _raise_on_failure(await auth_service.authenticate(data.email, data.password))


@router.post(
    "/register",
    response_model=AuthResult,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    summary="Register a user",
)
@limiter.limit(auth_rate_limit, key_func=get_ip_only)
async def register(
    request: Request,
    data: Annotated[RegistrationVariant, Body(discriminator="role")],
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResult:
    """Register an admin, instructor or student.

    Args:
        request: HTTP request (used for rate limiting).
        data: Role-tagged registration payload.
        auth_service: Authentication service.

    Returns:
        AuthResult with the new user and a token.
    """
    return _raise_on_failure(await auth_service.register(data))


@router.get(
    "/me",
    response_model=AuthResult,
    response_model_exclude_none=True,
    summary="Get current user",
)
async def get_me(
    current_user: CurrentUser = Depends(require_auth),
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResult:
    """Return the authenticated user without its password hash."""
    user = await auth_service.get_user(current_user.id)
    if user is None:
        raise NotFoundError("User not found")
    return AuthResult(success=True, user=user)


@router.put(
    "/password",
    response_model=AuthResult,
    response_model_exclude_none=True,
    summary="Change password",
)
async def change_password(
    data: ChangePasswordRequest,
    current_user: CurrentUser = Depends(require_auth),
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResult:
    """Change the authenticated user's password."""
    return _raise_on_failure(
        await auth_service.change_password(current_user.id, data.new_password)
    )


@router.delete(
    "/users/{user_id}",
    response_model=AuthResult,
    response_model_exclude_none=True,
    summary="Delete a user",
)
async def delete_user(
    user_id: str,
    current_user: CurrentUser = Depends(require_admin),
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResult:
    """Delete a user and its role profile."""
    logger.info("Admin %s deleting user %s", current_user.id, user_id)
    return _raise_on_failure(await auth_service.delete_user(user_id))
