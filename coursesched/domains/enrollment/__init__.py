# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment domain: per-term credit load rule and student enrollment."""

from coursesched.domains.enrollment.load import (
    MAX_TERM_UNITS,
    EnrollmentLoadValidator,
    LoadExceededError,
)
from coursesched.domains.enrollment.service import (
    AlreadyEnrolledError,
    CourseNotFoundError,
    EnrollmentService,
    ScheduleNotFoundError,
    StudentNotFoundError,
)

__all__ = [
    "MAX_TERM_UNITS",
    "EnrollmentLoadValidator",
    "LoadExceededError",
    "EnrollmentService",
    "AlreadyEnrolledError",
    "StudentNotFoundError",
    "CourseNotFoundError",
    "ScheduleNotFoundError",
]
