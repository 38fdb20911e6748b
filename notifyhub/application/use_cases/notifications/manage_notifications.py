"""Owner-scoped bulk and lifecycle operations on notifications."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import timedelta

from notifyhub.domain.entities import Notification
from notifyhub.domain.errors import DomainError, ErrorKind
from notifyhub.domain.result import Err, Ok, Result
from notifyhub.utils import now_in_app_timezone

from ..errors import unexpected_error
from .mapper import NotificationMapper, NotificationResponse
from .mark_notification_read import NOT_FOUND_ERROR, UNAUTHORIZED_ERROR
from .ports import NotificationStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotificationStats:
    total: int
    unread: int
    by_status: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class CleanupSummary:
    expired: int
    outdated: int

    @property
    def total(self) -> int:
        return self.expired + self.outdated


def _owned_notification(
    store: NotificationStore, notification_id: str, recipient_id: str
) -> Notification:
    notification = store.find_by_id(notification_id)
    if notification is None:
        raise DomainError(ErrorKind.NOT_FOUND, NOT_FOUND_ERROR)
    if notification.user_id != recipient_id:
        raise DomainError(ErrorKind.UNAUTHORIZED, UNAUTHORIZED_ERROR)
    return notification


class MarkAllNotificationsReadUseCase:
    """Mark every unread notification of a recipient as read."""

    def __init__(self, notifications: NotificationStore) -> None:
        self._notifications = notifications

    def execute(self, recipient_id: str) -> Result[int]:
        try:
            if not recipient_id:
                return Err.of(ErrorKind.VALIDATION, "Validation failed: userId: Recipient is required")
            return Ok(self._notifications.mark_all_as_read(recipient_id))
        except Exception as exc:
            logger.exception("Failed to mark notifications of %s as read", recipient_id)
            return unexpected_error(exc)


class DeleteNotificationUseCase:
    def __init__(self, notifications: NotificationStore) -> None:
        self._notifications = notifications

    def execute(self, notification_id: str, recipient_id: str) -> Result[bool]:
        try:
            _owned_notification(self._notifications, notification_id, recipient_id)
            return Ok(self._notifications.delete(notification_id))
        except DomainError as exc:
            return Err(exc)
        except Exception as exc:
            logger.exception("Failed to delete notification %s", notification_id)
            return unexpected_error(exc)


class CancelNotificationUseCase:
    """Cancel a notification that has not been dispatched yet."""

    def __init__(self, notifications: NotificationStore) -> None:
        self._notifications = notifications

    def execute(self, notification_id: str, recipient_id: str) -> Result[NotificationResponse]:
        try:
            notification = _owned_notification(
                self._notifications, notification_id, recipient_id
            )
            if not notification.is_pending():
                return Err.of(
                    ErrorKind.BUSINESS_RULE, "Only pending notifications can be cancelled"
                )
            updated = self._notifications.update(notification.mark_as_cancelled())
            logger.info("Notification %s cancelled by %s", notification_id, recipient_id)
            return Ok(NotificationMapper.to_response(updated))
        except DomainError as exc:
            return Err(exc)
        except Exception as exc:
            logger.exception("Failed to cancel notification %s", notification_id)
            return unexpected_error(exc)


class GetNotificationStatsUseCase:
    def __init__(self, notifications: NotificationStore) -> None:
        self._notifications = notifications

    def execute(self, recipient_id: str) -> Result[NotificationStats]:
        try:
            by_status = self._notifications.count_by_status(recipient_id)
            return Ok(
                NotificationStats(
                    total=sum(by_status.values()),
                    unread=self._notifications.get_unread_count(recipient_id),
                    by_status=by_status,
                )
            )
        except Exception as exc:
            logger.exception("Failed to compute notification stats for %s", recipient_id)
            return unexpected_error(exc)


class CleanupNotificationsUseCase:
    """Purge expired notifications and the ones past the retention window."""

    def __init__(self, notifications: NotificationStore, *, retention_days: int) -> None:
        self._notifications = notifications
        self._retention_days = retention_days

    def execute(self) -> Result[CleanupSummary]:
        try:
            expired = self._notifications.delete_expired()
            cutoff = now_in_app_timezone() - timedelta(days=self._retention_days)
            outdated = self._notifications.delete_older_than(cutoff)
            logger.info(
                "Notification cleanup removed %s expired and %s outdated rows", expired, outdated
            )
            return Ok(CleanupSummary(expired=expired, outdated=outdated))
        except Exception as exc:
            logger.exception("Notification cleanup failed")
            return unexpected_error(exc)


__all__ = [
    "CancelNotificationUseCase",
    "CleanupNotificationsUseCase",
    "CleanupSummary",
    "DeleteNotificationUseCase",
    "GetNotificationStatsUseCase",
    "MarkAllNotificationsReadUseCase",
    "NotificationStats",
]
