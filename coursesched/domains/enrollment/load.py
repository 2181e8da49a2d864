# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Per-term credit load rule.

A student may carry at most MAX_TERM_UNITS credits in one semester of one
academic year. The validator sums the credits of the courses the student
is already enrolled in for that term and checks whether a proposed course
still fits.

Example:
    >>> validator = EnrollmentLoadValidator(db)
    >>> summary = await validator.validate(student.id, 3, "1st", "2024-2025")
    >>> summary.remaining_units
"""

import logging
import math
from numbers import Real
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from coursesched.core.exceptions import InvalidArgumentError, ServiceError, StoreFailureError
from coursesched.infrastructure.database.models import Enrollment
from coursesched.models.common import ErrorCode
from coursesched.models.enrollment import LoadSummary

logger = logging.getLogger(__name__)

MAX_TERM_UNITS = 21


class LoadExceededError(ServiceError):
    """Raised when a proposed course would push a term over MAX_TERM_UNITS.

    Attributes:
        current_units: Credits already committed in the term.
        projected_units: Credits the term would carry with the proposed course.
    """

    code = ErrorCode.LOAD_EXCEEDED

    def __init__(self, current_units: float, projected_units: float) -> None:
        super().__init__(
            f"Load limit exceeded: Student already has {MAX_TERM_UNITS} units for this semester."
        )
        self.current_units = current_units
        self.projected_units = projected_units


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _credit_value(credits: Any) -> float:
    """Credits of a course as a number; anything non-numeric counts as 0."""
    if not _is_number(credits) or not math.isfinite(credits):
        return 0.0
    return float(credits)


class EnrollmentLoadValidator:
    """Checks the per-term credit ceiling for a student.

    Attributes:
        _db: Database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def validate(
        self,
        student_id: str,
        proposed_credits: Any,
        semester: Any,
        academic_year: Any,
    ) -> LoadSummary:
        """Check whether a proposed course fits in a student's term.

        Semester and academic year are compared as strings, so an academic
        year given as 2024 matches one stored as "2024".

        Args:
            student_id: Student profile ID.
            proposed_credits: Credits of the course being added.
            semester: Term semester label.
            academic_year: Term academic year.

        Returns:
            Current, projected and remaining units for the term.

        Raises:
            InvalidArgumentError: If an argument is missing or
                proposed_credits is not a number.
            LoadExceededError: If the projected load exceeds MAX_TERM_UNITS.
            StoreFailureError: If the enrollment query fails.
        """
        if not student_id:
            raise InvalidArgumentError("student_id is required")
        if not _is_number(proposed_credits):
            raise InvalidArgumentError("proposed_credits must be a number")
        if not semester or not academic_year:
            raise InvalidArgumentError("semester and academic_year are required")

        current_units = await self._current_units(
            str(student_id), str(semester), str(academic_year)
        )
        projected_units = current_units + _credit_value(proposed_credits)

        if projected_units > MAX_TERM_UNITS:
            logger.info(
                "Load exceeded for student %s in %s %s: %.1f + %s",
                student_id,
                semester,
                academic_year,
                current_units,
                proposed_credits,
            )
            raise LoadExceededError(current_units, projected_units)

        return LoadSummary(
            current_units=current_units,
            projected_units=projected_units,
            remaining_units=max(0.0, MAX_TERM_UNITS - projected_units),
        )

    async def _current_units(self, student_id: str, semester: str, academic_year: str) -> float:
        """Sum the credits already committed in one term."""
        query = (
            select(Enrollment)
            .options(selectinload(Enrollment.course), selectinload(Enrollment.schedule))
            .where(Enrollment.student_id == student_id)
        )

        try:
            result = await self._db.execute(query)
        except SQLAlchemyError as e:
            await self._db.rollback()
            logger.error("Failed to load enrollments: %s", str(e), exc_info=True)
            raise StoreFailureError("Failed to load enrollments", e) from e

        total = 0.0
        for enrollment in result.scalars().all():
            course, schedule = enrollment.course, enrollment.schedule
            if course is None or schedule is None:
                continue
            if str(schedule.semester) != semester or str(schedule.academic_year) != academic_year:
                continue
            total += _credit_value(course.credits)
        return total
