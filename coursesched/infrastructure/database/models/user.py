# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Principal and role profile tables.

Profiles reference ``users.id`` with ON DELETE CASCADE. User carries no ORM
relationship to its profiles, so deleting a user issues a single DELETE and
leaves the profile cleanup to the database and to AuthService.delete_user.
"""

from typing import Any

from sqlalchemy import JSON, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from coursesched.infrastructure.database.models.base import (
    Base,
    TimestampMixin,
    UUIDPrimaryKeyMixin,
)


class User(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """An authenticated identity with a role."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(32), nullable=False)
    name: Mapped[str | None] = mapped_column(String(255))
    department: Mapped[str | None] = mapped_column(String(255))

    def __repr__(self) -> str:
        return f"<User {self.email} ({self.role})>"


class InstructorProfile(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Teaching capacity and availability of an instructor."""

    __tablename__ = "instructor_profiles"

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    max_hours_per_week: Mapped[int] = mapped_column(Integer, default=20, nullable=False)
    specializations: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    availability: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)


class StudentProfile(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Academic record of a student."""

    __tablename__ = "student_profiles"

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    student_id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    department: Mapped[str | None] = mapped_column(String(255))
    year: Mapped[str] = mapped_column(String(1), nullable=False)
    section: Mapped[str | None] = mapped_column(String(64))
    enrolled_courses: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
