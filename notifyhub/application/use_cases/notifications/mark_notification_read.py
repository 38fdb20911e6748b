"""Use case marking a single notification as read by its owner."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from notifyhub.domain.errors import DomainError, ErrorKind

from ..errors import UNKNOWN_ERROR
from .mapper import NotificationMapper, NotificationResponse
from .ports import NotificationStore

logger = logging.getLogger(__name__)

NOT_FOUND_ERROR = "Notification not found"
UNAUTHORIZED_ERROR = "Unauthorized"


@dataclass
class MarkNotificationReadRequest:
    notification_id: str
    recipient_id: str


@dataclass(frozen=True)
class NotificationResult:
    success: bool
    notification: NotificationResponse | None = None
    error: str | None = None
    error_kind: ErrorKind | None = None
    message: str | None = None


class MarkNotificationReadUseCase:
    def __init__(self, notifications: NotificationStore) -> None:
        self._notifications = notifications

    def execute(self, request: MarkNotificationReadRequest) -> NotificationResult:
        try:
            notification = self._notifications.find_by_id(request.notification_id)
            if notification is None:
                return NotificationResult(
                    success=False, error=NOT_FOUND_ERROR, error_kind=ErrorKind.NOT_FOUND
                )
            if notification.user_id != request.recipient_id:
                return NotificationResult(
                    success=False, error=UNAUTHORIZED_ERROR, error_kind=ErrorKind.UNAUTHORIZED
                )

            updated = self._notifications.update(notification.mark_as_read())
            return NotificationResult(
                success=True,
                notification=NotificationMapper.to_response(updated),
                message="Notification marked as read",
            )
        except DomainError as exc:
            return NotificationResult(success=False, error=exc.message, error_kind=exc.kind)
        except Exception as exc:
            logger.exception("Failed to mark notification %s as read", request.notification_id)
            return NotificationResult(
                success=False, error=str(exc) or UNKNOWN_ERROR, error_kind=ErrorKind.INTERNAL
            )


__all__ = [
    "MarkNotificationReadRequest",
    "MarkNotificationReadUseCase",
    "NOT_FOUND_ERROR",
    "NotificationResult",
    "UNAUTHORIZED_ERROR",
]
