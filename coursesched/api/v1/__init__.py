# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API v1 routes package.

Modules:
    auth: Login, registration and account endpoints.
    notifications: In-app notification endpoints.
    enrollments: Load validation and enrollment endpoints.
"""

from fastapi import APIRouter

from coursesched.api.v1 import auth, enrollments, notifications

# Create the main v1 router
router = APIRouter(prefix="/api/v1")

router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
router.include_router(notifications.router, prefix="/notifications", tags=["Notifications"])
router.include_router(enrollments.router, prefix="/enrollments", tags=["Enrollments"])

__all__ = ["router"]
