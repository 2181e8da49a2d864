# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""In-app notification domain.

Exports:
    NotificationService: Create, list and mark notifications as read.
    NotificationNotFoundError: Notification does not exist.
    NotificationAccessError: Notification is not addressed to the caller.
"""

from coursesched.domains.notification.service import (
    NotificationAccessError,
    NotificationNotFoundError,
    NotificationService,
    can_see,
)

__all__ = [
    "NotificationService",
    "NotificationNotFoundError",
    "NotificationAccessError",
    "can_see",
]
