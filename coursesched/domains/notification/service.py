# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Notification service for in-app notifications.

A notification is addressed either to one user or to every principal of a
role. A principal sees a notification when it is the target user, or when
the notification targets its role and no specific user. The same rule is
expressed twice: as a SQL clause for queries and bulk updates, and as a
Python predicate for single-record access checks.
"""

import logging

from sqlalchemy import ColumnElement, and_, func, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from coursesched.core.exceptions import (
    InvalidArgumentError,
    NotFoundError,
    ServiceError,
    StoreFailureError,
)
from coursesched.infrastructure.database.models import Notification
from coursesched.models.common import ErrorCode, PrincipalRef, Role
from coursesched.models.notification import NotificationCreate, NotificationResponse
from coursesched.utils.datetime import Clock, utc_now

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 100


class NotificationNotFoundError(NotFoundError):
    """Raised when a notification does not exist."""


class NotificationAccessError(ServiceError):
    """Raised when a principal touches a notification not addressed to it."""

    code = ErrorCode.UNAUTHORIZED


def _role_value(role: Role | str) -> str:
    return Role(role).value


def visible_to(principal: PrincipalRef) -> ColumnElement[bool]:
    """SQL clause selecting the notifications a principal may see."""
    return or_(
        Notification.target_user_id == str(principal.id),
        and_(
            Notification.target_role == _role_value(principal.role),
            Notification.target_user_id.is_(None),
        ),
    )


def can_see(notification: Notification, principal: PrincipalRef) -> bool:
    """Python form of visible_to for a loaded notification."""
    if notification.target_user_id is not None:
        return notification.target_user_id == str(principal.id)
    return notification.target_role == _role_value(principal.role)


class NotificationService:
    """Service for creating and reading notifications.

    Attributes:
        _db: Database session.
        _clock: Source of the current time.
    """

    def __init__(self, db: AsyncSession, clock: Clock = utc_now) -> None:
        """Initialize the notification service.

        Args:
            db: Async database session.
            clock: Returns the current UTC time. Injected by tests.
        """
        self._db = db
        self._clock = clock

    async def create(self, request: NotificationCreate) -> NotificationResponse:
        """Create an unread notification.

        Args:
            request: Title, message, type and audience.

        Returns:
            The stored notification.

        Raises:
            InvalidArgumentError: If title or message is blank, or no
                audience is given.
            StoreFailureError: If the insert fails.
        """
        title = request.title.strip()
        message = request.message.strip()
        if not title or not message:
            raise InvalidArgumentError("Title and message are required")
        if request.target_role is None and not request.target_user_id:
            raise InvalidArgumentError("Either target_role or target_user_id is required")

        notification = Notification(
            title=title,
            message=message,
            type=request.type.value,
            target_role=request.target_role.value if request.target_role else None,
            target_user_id=request.target_user_id or None,
            created_at=self._clock(),
            read=False,
        )

        try:
            self._db.add(notification)
            await self._db.commit()
        except SQLAlchemyError as e:
            raise await self._store_failure("create notification", e)

        logger.info(
            "Created %s notification %s for %s",
            notification.type,
            notification.id,
            notification.target_user_id or f"role:{notification.target_role}",
        )
        return NotificationResponse.model_validate(notification)

    async def list_for(self, principal: PrincipalRef) -> list[NotificationResponse]:
        """List notifications visible to a principal, newest first.

        Args:
            principal: Caller identity.

        Returns:
            At most HISTORY_LIMIT notifications.

        Raises:
            StoreFailureError: If the query fails.
        """
        query = (
            select(Notification)
            .where(visible_to(principal))
            .order_by(Notification.created_at.desc())
            .limit(HISTORY_LIMIT)
        )

        try:
            result = await self._db.execute(query)
        except SQLAlchemyError as e:
            raise await self._store_failure("list notifications", e)

        return [NotificationResponse.model_validate(n) for n in result.scalars().all()]

    async def mark_read(
        self,
        notification_id: str,
        principal: PrincipalRef,
    ) -> NotificationResponse:
        """Mark one notification as read.

        Marking an already-read notification succeeds and keeps the time of
        the first read.

        Args:
            notification_id: Notification to mark.
            principal: Caller identity.

        Returns:
            The updated notification.

        Raises:
            NotificationNotFoundError: If the notification does not exist.
            NotificationAccessError: If it is not addressed to the caller.
            StoreFailureError: If the update fails.
        """
        try:
            notification = await self._db.get(Notification, str(notification_id))
        except SQLAlchemyError as e:
            raise await self._store_failure("load notification", e)

        if notification is None:
            raise NotificationNotFoundError("Notification not found")

        if not can_see(notification, principal):
            logger.warning(
                "Principal %s tried to read notification %s",
                principal.id,
                notification_id,
            )
            raise NotificationAccessError("Unauthorized to read this notification")

        if not notification.read:
            notification.read = True
            notification.read_at = self._clock()
            try:
                await self._db.commit()
            except SQLAlchemyError as e:
                raise await self._store_failure("mark notification read", e)

        return NotificationResponse.model_validate(notification)

    async def mark_all_read_for(self, principal: PrincipalRef) -> None:
        """Mark every unread notification visible to a principal as read.

        Args:
            principal: Caller identity.

        Raises:
            StoreFailureError: If the update fails.
        """
        statement = (
            update(Notification)
            .where(visible_to(principal), Notification.read.is_(False))
            .values(read=True, read_at=self._clock())
            .execution_options(synchronize_session="fetch")
        )

        try:
            result = await self._db.execute(statement)
            await self._db.commit()
        except SQLAlchemyError as e:
            raise await self._store_failure("mark notifications read", e)

        logger.debug("Marked %d notifications read for %s", result.rowcount, principal.id)

    async def unread_count_for(self, principal: PrincipalRef) -> int:
        """Count unread notifications visible to a principal.

        Raises:
            StoreFailureError: If the query fails.
        """
        query = (
            select(func.count())
            .select_from(Notification)
            .where(visible_to(principal), Notification.read.is_(False))
        )

        try:
            result = await self._db.execute(query)
        except SQLAlchemyError as e:
            raise await self._store_failure("count unread notifications", e)

        return result.scalar_one()

    async def _store_failure(self, operation: str, error: SQLAlchemyError) -> StoreFailureError:
        await self._db.rollback()
        logger.error("Failed to %s: %s", operation, str(error), exc_info=True)
        return StoreFailureError(f"Failed to {operation}", error)
