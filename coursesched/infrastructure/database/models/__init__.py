# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy models for the scheduling store."""

from coursesched.infrastructure.database.models.academic import Course, Enrollment, Schedule
from coursesched.infrastructure.database.models.base import Base, TimestampMixin, new_id
from coursesched.infrastructure.database.models.notification import Notification
from coursesched.infrastructure.database.models.user import (
    InstructorProfile,
    StudentProfile,
    User,
)

__all__ = [
    "Base",
    "TimestampMixin",
    "new_id",
    "User",
    "InstructorProfile",
    "StudentProfile",
    "Notification",
    "Course",
    "Schedule",
    "Enrollment",
]
