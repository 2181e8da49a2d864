# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment and credit-load models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class LoadSummary(BaseModel):
    """Credit load of a student for one term.

    Attributes:
        current_units: Credits already committed in the term.
        projected_units: Committed credits plus the proposed course.
        remaining_units: Headroom left under the ceiling, never negative.
    """

    current_units: float
    projected_units: float
    remaining_units: float


class LoadValidationRequest(BaseModel):
    """Request body for a load check."""

    student_id: str
    proposed_credits: float = Field(strict=True)
    semester: str
    academic_year: str | int


class EnrollStudentRequest(BaseModel):
    """Request body for enrolling a student in a course."""

    student_id: str
    course_id: str
    schedule_id: str | None = None
    semester: str | None = None
    academic_year: str | None = None


class EnrollmentResponse(BaseModel):
    """A created enrollment with the resulting load."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    student_id: str
    course_id: str
    schedule_id: str | None = None
    created_at: datetime | None = None
    load: LoadSummary | None = Field(default=None)


class LoadValidationResponse(BaseModel):
    """Result of a successful load check."""

    success: bool = True
    load: LoadSummary


class EnrollmentEnvelope(BaseModel):
    """A created enrollment wrapped in the standard response shape."""

    success: bool = True
    enrollment: EnrollmentResponse
