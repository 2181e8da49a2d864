# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication request and response models.

Registration is a tagged variant on ``role``: each variant carries only the
fields that role needs, and pydantic resolves the variant from the
discriminator instead of guessing from which optional fields are present.
"""

from datetime import datetime
from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from coursesched.models.common import ErrorCode, Role
from coursesched.utils.datetime import ensure_utc

STUDENT_YEARS = ("1", "2", "3", "4")


class TimeRange(BaseModel):
    """An availability window within a day (HH:MM strings)."""

    start_time: str = Field(pattern=r"^\d{2}:\d{2}$")
    end_time: str = Field(pattern=r"^\d{2}:\d{2}$")


class _RegistrationBase(BaseModel):
    """Fields shared by every registration variant."""

    email: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1)
    name: str | None = Field(default=None, max_length=255)
    department: str | None = Field(default=None, max_length=255)


class AdminRegistration(_RegistrationBase):
    """Registration payload for an administrator."""

    role: Literal["admin"]


class InstructorRegistration(_RegistrationBase):
    """Registration payload for an instructor."""

    role: Literal["instructor"]
    max_hours_per_week: int = Field(default=20, ge=1)
    specializations: list[str] = Field(default_factory=list)
    availability: dict[str, list[TimeRange]] = Field(default_factory=dict)

    @field_validator("specializations")
    @classmethod
    def dedupe_specializations(cls, value: list[str]) -> list[str]:
        """Strip and de-duplicate specializations, keeping first-seen order."""
        seen: dict[str, None] = {}
        for item in value:
            item = item.strip()
            if item:
                seen.setdefault(item, None)
        return list(seen)


class StudentRegistration(_RegistrationBase):
    """Registration payload for a student."""

    role: Literal["student"]
    student_id: str | None = Field(default=None, max_length=64)
    year: str
    section: str | None = Field(default=None, max_length=64)
    enrolled_courses: list[str] = Field(default_factory=list)

    @field_validator("year", mode="before")
    @classmethod
    def coerce_year(cls, value: Any) -> str:
        """Accept 1-4 as int or string."""
        if isinstance(value, bool):
            raise ValueError("year must be one of 1, 2, 3, 4")
        value = str(value).strip()
        if value not in STUDENT_YEARS:
            raise ValueError(f"{value} is not a valid year")
        return value


RegistrationVariant = Union[AdminRegistration, InstructorRegistration, StudentRegistration]


class LoginRequest(BaseModel):
    """Login request body."""

    email: str
    password: str


class ChangePasswordRequest(BaseModel):
    """Password change request body."""

    new_password: str = Field(min_length=1)


class PrincipalResponse(BaseModel):
    """Outward view of a principal. Never carries the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    role: Role
    name: str | None = None
    department: str | None = None
    created_at: datetime | None = None

    @field_validator("created_at")
    @classmethod
    def as_utc(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value)


class TokenClaims(BaseModel):
    """Decoded payload of a verified token.

    Attributes:
        id: Principal ID.
        email: Principal email.
        role: Principal role.
        issued_at: When the token was issued.
        expires_at: When the token stops being valid.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    email: str
    role: Role
    issued_at: datetime
    expires_at: datetime


class AuthResult(BaseModel):
    """Uniform result of an authentication flow.

    ``success`` is always present. Failures carry ``reason`` and ``message``;
    successful login/registration carry ``user`` and ``token``.
    """

    success: bool
    message: str | None = None
    reason: ErrorCode | None = None
    user: PrincipalResponse | None = None
    token: str | None = None

    @classmethod
    def failure(cls, reason: ErrorCode, message: str) -> "AuthResult":
        """Build a failed result."""
        return cls(success=False, reason=reason, message=message)
