"""Conversion between notification entities and response DTOs."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from notifyhub.domain.entities import (
    Notification,
    NotificationChannel,
    NotificationPriority,
    NotificationStatus,
    NotificationType,
)


@dataclass(frozen=True)
class NotificationResponse:
    """Read model of a notification handed to the presentation layer."""

    id: str
    user_id: str
    type: str
    title: str
    message: str
    channels: list[str]
    status: str
    priority: str
    template_id: str | None = None
    scheduled_for: datetime | None = None
    sent_at: datetime | None = None
    delivered_at: datetime | None = None
    read_at: datetime | None = None
    expires_at: datetime | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    delivery_data: dict[str, Any] = field(default_factory=dict)
    retry_count: int = 0
    max_retries: int = 3
    last_error: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class NotificationMapper:
    """Map :class:`Notification` to :class:`NotificationResponse` and back."""

    @staticmethod
    def to_response(notification: Notification) -> NotificationResponse:
        return NotificationResponse(
            id=notification.id,
            user_id=notification.user_id,
            type=notification.type.value,
            title=notification.title,
            message=notification.message,
            channels=[channel.value for channel in notification.channels],
            status=notification.status.value,
            priority=notification.priority.value,
            template_id=notification.template_id,
            scheduled_for=notification.scheduled_for,
            sent_at=notification.sent_at,
            delivered_at=notification.delivered_at,
            read_at=notification.read_at,
            expires_at=notification.expires_at,
            metadata=dict(notification.metadata),
            delivery_data=dict(notification.delivery_data),
            retry_count=notification.retry_count,
            max_retries=notification.max_retries,
            last_error=notification.last_error,
            created_at=notification.created_at,
            updated_at=notification.updated_at,
        )

    @staticmethod
    def from_response(response: NotificationResponse) -> Notification:
        return Notification(
            id=response.id,
            user_id=response.user_id,
            type=NotificationType(response.type),
            title=response.title,
            message=response.message,
            channels=tuple(NotificationChannel(channel) for channel in response.channels),
            status=NotificationStatus(response.status),
            priority=NotificationPriority(response.priority),
            template_id=response.template_id,
            scheduled_for=response.scheduled_for,
            sent_at=response.sent_at,
            delivered_at=response.delivered_at,
            read_at=response.read_at,
            expires_at=response.expires_at,
            metadata=dict(response.metadata),
            delivery_data=dict(response.delivery_data),
            retry_count=response.retry_count,
            max_retries=response.max_retries,
            last_error=response.last_error,
            created_at=response.created_at,
            updated_at=response.updated_at,
        )

    @classmethod
    def to_responses(cls, notifications) -> list[NotificationResponse]:
        return [cls.to_response(notification) for notification in notifications]


__all__ = ["NotificationMapper", "NotificationResponse"]
