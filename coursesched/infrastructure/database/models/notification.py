# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Notification table."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from coursesched.infrastructure.database.models.base import Base, UUIDPrimaryKeyMixin
from coursesched.utils.datetime import utc_now


class Notification(UUIDPrimaryKeyMixin, Base):
    """A message addressed to one user or to every user of a role.

    ``target_user_id`` is deliberately not a foreign key: notifications
    outlive the users they were addressed to.
    """

    __tablename__ = "notifications"
    __table_args__ = (
        Index("ix_notifications_user_read_created", "target_user_id", "read", "created_at"),
        Index("ix_notifications_role_read_created", "target_role", "read", "created_at"),
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(String(32), default="info", nullable=False)
    target_role: Mapped[str | None] = mapped_column(String(32))
    target_user_id: Mapped[str | None] = mapped_column(String(36))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )
    read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    read_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
