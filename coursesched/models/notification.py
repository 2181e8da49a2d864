# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Notification request and response models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from coursesched.models.common import NotificationType, Role
from coursesched.utils.datetime import ensure_utc


class NotificationCreate(BaseModel):
    """Notification creation payload.

    The audience is either a single user (``target_user_id``) or every
    principal of a role (``target_role``).
    """

    title: str
    message: str
    type: NotificationType = NotificationType.INFO
    target_role: Role | None = None
    target_user_id: str | None = None


class NotificationResponse(BaseModel):
    """Notification as returned to clients."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    message: str
    type: NotificationType
    target_role: Role | None = None
    target_user_id: str | None = None
    created_at: datetime
    read: bool
    read_at: datetime | None = None

    @field_validator("created_at", "read_at")
    @classmethod
    def as_utc(cls, value: datetime | None) -> datetime | None:
        """SQLite returns naive datetimes; report everything in UTC."""
        return ensure_utc(value)


class NotificationListResponse(BaseModel):
    """Notification history for the current principal."""

    success: bool = True
    notifications: list[NotificationResponse] = Field(default_factory=list)
    unread_count: int = 0


class NotificationEnvelope(BaseModel):
    """A single notification wrapped in the standard response shape."""

    success: bool = True
    notification: NotificationResponse
