# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course, schedule and enrollment tables.

These are owned by the course/schedule CRUD handlers. The load rule only
reads them; EnrollmentService is the one writer in this package.
"""

from datetime import datetime

from sqlalchemy import DateTime, Float, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from coursesched.infrastructure.database.models.base import Base, UUIDPrimaryKeyMixin
from coursesched.utils.datetime import utc_now


class Course(UUIDPrimaryKeyMixin, Base):
    """A catalogue course."""

    __tablename__ = "courses"

    code: Mapped[str] = mapped_column(String(32), index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    credits: Mapped[float | None] = mapped_column(Float)


class Schedule(UUIDPrimaryKeyMixin, Base):
    """A scheduled offering of a course in a term."""

    __tablename__ = "schedules"

    course_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
    )
    semester: Mapped[str] = mapped_column(String(32), nullable=False)
    academic_year: Mapped[str] = mapped_column(String(16), nullable=False)
    day_of_week: Mapped[str | None] = mapped_column(String(16))
    start_time: Mapped[str | None] = mapped_column(String(5))
    end_time: Mapped[str | None] = mapped_column(String(5))

    course: Mapped[Course] = relationship()


class Enrollment(UUIDPrimaryKeyMixin, Base):
    """A student taking a course, optionally in a specific schedule slot."""

    __tablename__ = "enrollments"
    __table_args__ = (
        UniqueConstraint("student_id", "course_id", "schedule_id", name="uq_enrollment_slot"),
    )

    student_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("student_profiles.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    course_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("courses.id", ondelete="SET NULL"),
    )
    schedule_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("schedules.id", ondelete="SET NULL"),
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )

    course: Mapped[Course | None] = relationship()
    schedule: Mapped[Schedule | None] = relationship()
