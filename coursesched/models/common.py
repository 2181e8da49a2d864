# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Shared enumerations and protocols used across domains."""

from enum import Enum
from typing import Protocol

from pydantic import BaseModel


class Role(str, Enum):
    """Principal roles.

    This is the single closed set of roles. Registration dispatch,
    notification visibility and the role gate all branch on it.
    """

    ADMIN = "admin"
    INSTRUCTOR = "instructor"
    STUDENT = "student"


class NotificationType(str, Enum):
    """Notification categories shown by the dashboards."""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
    SCHEDULE = "schedule"
    ENROLLMENT = "enrollment"
    REQUEST = "request"


class ErrorCode(str, Enum):
    """Failure reasons reported by the service layer."""

    INVALID_ARGUMENT = "invalid_argument"
    NOT_FOUND = "not_found"
    BAD_CREDENTIAL = "bad_credential"
    DUPLICATE_EMAIL = "duplicate_email"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"
    UNAUTHORIZED = "unauthorized"
    LOAD_EXCEEDED = "load_exceeded"
    STORE_FAILURE = "store_failure"


class MessageResponse(BaseModel):
    """Acknowledgement without a payload."""

    success: bool = True
    message: str


class PrincipalRef(Protocol):
    """Anything that identifies an authenticated principal.

    Satisfied by TokenClaims, CurrentUser and PrincipalResponse.
    """

    @property
    def id(self) -> str: ...

    @property
    def role(self) -> Role: ...
