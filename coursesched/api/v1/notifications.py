# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Notification API endpoints.

- GET / - Notifications visible to the current user
- POST / - Create a notification (admin or instructor)
- PATCH /{notification_id}/read - Mark one notification read
- POST /mark-all-read - Mark all visible notifications read
"""

from fastapi import APIRouter, Depends, status

from coursesched.api.dependencies import get_notification_service, require_auth, require_staff
from coursesched.api.middleware.auth import CurrentUser
from coursesched.domains.notification.service import NotificationService
from coursesched.models.common import MessageResponse
from coursesched.models.notification import (
    NotificationCreate,
    NotificationEnvelope,
    NotificationListResponse,
)

router = APIRouter()


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    current_user: CurrentUser = Depends(require_auth),
    service: NotificationService = Depends(get_notification_service),
) -> NotificationListResponse:
    """List the current user's notifications, newest first."""
    notifications = await service.list_for(current_user)
    unread_count = await service.unread_count_for(current_user)
    return NotificationListResponse(notifications=notifications, unread_count=unread_count)


@router.post(
    "",
    response_model=NotificationEnvelope,
    status_code=status.HTTP_201_CREATED,
)
async def create_notification(
    data: NotificationCreate,
    current_user: CurrentUser = Depends(require_staff),
    service: NotificationService = Depends(get_notification_service),
) -> NotificationEnvelope:
    """Create a notification for a user or a role."""
    return NotificationEnvelope(notification=await service.create(data))


@router.patch("/{notification_id}/read", response_model=NotificationEnvelope)
async def mark_notification_read(
    notification_id: str,
    current_user: CurrentUser = Depends(require_auth),
    service: NotificationService = Depends(get_notification_service),
) -> NotificationEnvelope:
    """Mark one notification as read."""
    return NotificationEnvelope(
        notification=await service.mark_read(notification_id, current_user)
    )


@router.post("/mark-all-read", response_model=MessageResponse)
async def mark_all_notifications_read(
    current_user: CurrentUser = Depends(require_auth),
    service: NotificationService = Depends(get_notification_service),
) -> MessageResponse:
    """Mark every notification visible to the current user as read."""
    await service.mark_all_read_for(current_user)
    return MessageResponse(message="All notifications marked as read")
