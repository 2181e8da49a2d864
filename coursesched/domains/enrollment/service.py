# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment service for enrolling students in courses.

This module provides the EnrollmentService class, which enforces the
per-term credit load before writing an enrollment and then tells the
student about it with an in-app notification.
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from coursesched.core.exceptions import (
    InvalidArgumentError,
    NotFoundError,
    StoreFailureError,
)
from coursesched.domains.enrollment.load import EnrollmentLoadValidator
from coursesched.domains.notification.service import NotificationService
from coursesched.infrastructure.database.models import (
    Course,
    Enrollment,
    Schedule,
    StudentProfile,
)
from coursesched.models.common import NotificationType
from coursesched.models.enrollment import EnrollmentResponse
from coursesched.models.notification import NotificationCreate
from coursesched.utils.datetime import Clock, utc_now

logger = logging.getLogger(__name__)


class StudentNotFoundError(NotFoundError):
    """Raised when student is not found."""


class CourseNotFoundError(NotFoundError):
    """Raised when course is not found."""


class ScheduleNotFoundError(NotFoundError):
    """Raised when schedule is not found."""


class AlreadyEnrolledError(InvalidArgumentError):
    """Raised when student is already enrolled in the course slot."""


class EnrollmentService:
    """Service for enrolling students.

    Attributes:
        _db: Async database session.
        _load_validator: Per-term credit ceiling check.
        _notifications: Used to confirm the enrollment to the student.
    """

    def __init__(self, db: AsyncSession, clock: Clock = utc_now) -> None:
        """Initialize enrollment service.

        Args:
            db: Async database session.
            clock: Returns the current UTC time. Injected by tests.
        """
        self._db = db
        self._load_validator = EnrollmentLoadValidator(db)
        self._notifications = NotificationService(db, clock=clock)

    async def enroll_student(
        self,
        student_id: str,
        course_id: str,
        schedule_id: str | None = None,
        semester: str | None = None,
        academic_year: str | None = None,
    ) -> EnrollmentResponse:
        """Enroll a student in a course.

        The term is taken from the schedule when one is given, otherwise
        from ``semester`` and ``academic_year``.

        Args:
            student_id: Student profile ID.
            course_id: Course ID.
            schedule_id: Optional schedule slot.
            semester: Term semester when no schedule is given.
            academic_year: Term academic year when no schedule is given.

        Returns:
            The enrollment together with the student's resulting load.

        Raises:
            StudentNotFoundError: If student not found.
            CourseNotFoundError: If course not found.
            ScheduleNotFoundError: If schedule not found.
            InvalidArgumentError: If the term is unknown or the schedule
                belongs to another course.
            AlreadyEnrolledError: If student already enrolled.
            LoadExceededError: If the course does not fit in the term.
            StoreFailureError: If the store fails.
        """
        try:
            student = await self._db.get(StudentProfile, str(student_id))
            course = await self._db.get(Course, str(course_id))
            schedule = await self._db.get(Schedule, str(schedule_id)) if schedule_id else None
        except SQLAlchemyError as e:
            raise await self._store_failure("load enrollment references", e)

        if student is None:
            raise StudentNotFoundError("Student not found")
        if course is None:
            raise CourseNotFoundError("Course not found")
        if schedule_id and schedule is None:
            raise ScheduleNotFoundError("Schedule not found")

        if schedule is not None:
            if schedule.course_id != course.id:
                raise InvalidArgumentError("Schedule does not belong to this course")
            semester, academic_year = schedule.semester, schedule.academic_year
        if not semester or not academic_year:
            raise InvalidArgumentError("semester and academic_year are required")

        if await self._is_enrolled(student.id, course.id, schedule.id if schedule else None):
            raise AlreadyEnrolledError("Student is already enrolled in this course")

        load = await self._load_validator.validate(
            student.id,
            course.credits if course.credits is not None else 0,
            semester,
            academic_year,
        )

        enrollment = Enrollment(
            student_id=student.id,
            course_id=course.id,
            schedule_id=schedule.id if schedule else None,
        )

        try:
            self._db.add(enrollment)
            enrolled_courses = list(student.enrolled_courses or [])
            if course.id not in enrolled_courses:
                student.enrolled_courses = [*enrolled_courses, course.id]
            await self._db.commit()
        except SQLAlchemyError as e:
            raise await self._store_failure("create enrollment", e)

        logger.info(
            "Enrolled student: student=%s, course=%s, term=%s %s",
            student.id,
            course.id,
            semester,
            academic_year,
        )

        await self._notify_student(student, course)

        return EnrollmentResponse(
            id=enrollment.id,
            student_id=enrollment.student_id,
            course_id=course.id,
            schedule_id=enrollment.schedule_id,
            created_at=enrollment.created_at,
            load=load,
        )

    async def _is_enrolled(
        self,
        student_id: str,
        course_id: str,
        schedule_id: str | None,
    ) -> bool:
        query = select(Enrollment.id).where(
            Enrollment.student_id == student_id,
            Enrollment.course_id == course_id,
            Enrollment.schedule_id == schedule_id
            if schedule_id
            else Enrollment.schedule_id.is_(None),
        )
        try:
            result = await self._db.execute(query.limit(1))
        except SQLAlchemyError as e:
            raise await self._store_failure("check existing enrollment", e)
        return result.scalar_one_or_none() is not None

    async def _notify_student(self, student: StudentProfile, course: Course) -> None:
        """Send the enrollment confirmation. The enrollment stands if this fails."""
        try:
            await self._notifications.create(
                NotificationCreate(
                    title="Enrollment Confirmed",
                    message=f"You have been enrolled in {course.code} - {course.name}",
                    type=NotificationType.ENROLLMENT,
                    target_user_id=student.user_id,
                )
            )
        except StoreFailureError as e:
            logger.warning(
                "Enrollment confirmation not sent to student %s: %s",
                student.id,
                str(e),
            )

    async def _store_failure(self, operation: str, error: SQLAlchemyError) -> StoreFailureError:
        await self._db.rollback()
        logger.error("Failed to %s: %s", operation, str(error), exc_info=True)
        return StoreFailureError(f"Failed to {operation}", error)
