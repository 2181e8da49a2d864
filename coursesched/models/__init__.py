# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pydantic models shared by services and the API layer."""

from coursesched.models.common import (
    ErrorCode,
    MessageResponse,
    NotificationType,
    PrincipalRef,
    Role,
)

__all__ = [
    "ErrorCode",
    "MessageResponse",
    "NotificationType",
    "PrincipalRef",
    "Role",
]
