# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Service-layer exception hierarchy.

Every exception raised across a service boundary derives from ServiceError
and carries an ErrorCode, which the API layer maps to an HTTP status.
Domain modules subclass these for their own failure cases.
"""

from coursesched.models.common import ErrorCode


class ServiceError(Exception):
    """Base exception for service errors.

    Attributes:
        message: Human-readable error description.
        code: Machine-readable failure reason.
    """

    code: ErrorCode = ErrorCode.INVALID_ARGUMENT

    def __init__(self, message: str, code: ErrorCode | None = None) -> None:
        """Initialize the service error.

        Args:
            message: Human-readable error description.
            code: Overrides the class-level code when given.
        """
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class InvalidArgumentError(ServiceError):
    """Raised when caller input is malformed."""

    code = ErrorCode.INVALID_ARGUMENT


class NotFoundError(ServiceError):
    """Raised when a referenced entity does not exist."""

    code = ErrorCode.NOT_FOUND


class UnauthenticatedError(ServiceError):
    """Raised when a request carries no valid token."""

    code = ErrorCode.UNAUTHENTICATED


class ForbiddenError(ServiceError):
    """Raised when a valid token has the wrong role."""

    code = ErrorCode.FORBIDDEN


class StoreFailureError(ServiceError):
    """Raised when the backing store fails.

    Attributes:
        original_error: The underlying SQLAlchemy or driver error.
    """

    code = ErrorCode.STORE_FAILURE

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        """Initialize the store failure.

        Args:
            message: Description of the operation that failed.
            original_error: The underlying exception that caused this error.
        """
        super().__init__(message)
        self.original_error = original_error

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.original_error:
            return f"{self.message}: {self.original_error}"
        return self.message
