# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment API endpoints.

- POST /validate-load - Check whether a course fits a student's term
- POST / - Enroll a student in a course (admin)
"""

from fastapi import APIRouter, Depends, status

from coursesched.api.dependencies import (
    get_enrollment_service,
    get_load_validator,
    require_admin,
    require_staff,
)
from coursesched.api.middleware.auth import CurrentUser
from coursesched.domains.enrollment.load import EnrollmentLoadValidator
from coursesched.domains.enrollment.service import EnrollmentService
from coursesched.models.enrollment import (
    EnrollmentEnvelope,
    EnrollStudentRequest,
    LoadValidationRequest,
    LoadValidationResponse,
)

router = APIRouter()


@router.post("/validate-load", response_model=LoadValidationResponse)
async def validate_load(
    data: LoadValidationRequest,
    current_user: CurrentUser = Depends(require_staff),
    validator: EnrollmentLoadValidator = Depends(get_load_validator),
) -> LoadValidationResponse:
    """Check a proposed course against the per-term credit ceiling."""
    load = await validator.validate(
        data.student_id,
        data.proposed_credits,
        data.semester,
        data.academic_year,
    )
    return LoadValidationResponse(load=load)


@router.post(
    "",
    response_model=EnrollmentEnvelope,
    status_code=status.HTTP_201_CREATED,
)
async def enroll_student(
    data: EnrollStudentRequest,
    current_user: CurrentUser = Depends(require_admin),
    service: EnrollmentService = Depends(get_enrollment_service),
) -> EnrollmentEnvelope:
    """Enroll a student after checking duplicates and term load."""
    enrollment = await service.enroll_student(
        data.student_id,
        data.course_id,
        schedule_id=data.schedule_id,
        semester=data.semester,
        academic_year=data.academic_year,
    )
    return EnrollmentEnvelope(enrollment=enrollment)
