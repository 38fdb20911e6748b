"""Use case orchestrating validation, persistence and delivery of a notification."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from anyio import to_thread

from notifyhub.domain.entities import (
    ChannelDelivery,
    Notification,
    NotificationChannel,
    NotificationPreference,
    NotificationType,
    unique_channels,
    validate_notification_fields,
)
from notifyhub.domain.errors import DomainError, ErrorKind

from .dispatcher import ChannelDispatcher
from .mapper import NotificationMapper, NotificationResponse
from .ports import NotificationStore, PreferenceStore, TemplateStore

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Notification sent successfully"
PARTIAL_FAILURE_MESSAGE = "Some notifications failed"
NO_CHANNELS_ERROR = "No enabled notification channels for this user"
TEMPLATE_NOT_FOUND_ERROR = "Notification template not found"
UNKNOWN_ERROR = "Unknown error occurred"

# Placeholder checked in place of a template-provided title or body.
_RESOLVED_LATER = "-"


@dataclass
class SendNotificationRequest:
    recipient_id: str
    type: NotificationType | str
    title: str = ""
    content: str = ""
    channels: list[NotificationChannel | str] | None = None
    priority: str | None = None
    template_id: str | None = None
    template_variables: dict[str, Any] | None = None
    scheduled_at: datetime | None = None
    expires_at: datetime | None = None
    metadata: dict[str, Any] | None = None


@dataclass(frozen=True)
class ChannelDeliveryResponse:
    channel: str
    success: bool
    message_id: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class SendNotificationResponse:
    success: bool
    notification: NotificationResponse | None = None
    error: str | None = None
    message: str | None = None
    error_kind: ErrorKind | None = None
    deliveries: list[ChannelDeliveryResponse] = field(default_factory=list)

    @classmethod
    def failure(
        cls,
        kind: ErrorKind,
        error: str,
        notification: Notification | None = None,
    ) -> "SendNotificationResponse":
        return cls(
            success=False,
            error=error,
            error_kind=kind,
            notification=NotificationMapper.to_response(notification) if notification else None,
        )


def filter_enabled_channels(
    channels: Sequence[NotificationChannel],
    preferences: Sequence[NotificationPreference],
) -> list[NotificationChannel]:
    """Drop the channels a ``general`` preference explicitly switches off."""

    general = [p for p in preferences if p.type is NotificationType.GENERAL]
    return [
        channel
        for channel in channels
        if all(preference.is_channel_enabled(channel) for preference in general)
    ]


class SendNotificationUseCase:
    """Validate, persist and deliver one notification.

    ``execute`` never raises: every outcome, expected or not, is returned as a
    :class:`SendNotificationResponse`.
    """

    def __init__(
        self,
        notifications: NotificationStore,
        templates: TemplateStore,
        preferences: PreferenceStore,
        dispatcher: ChannelDispatcher,
        *,
        default_channels: Sequence[NotificationChannel | str] = (NotificationChannel.IN_APP,),
        max_retries: int = 3,
    ) -> None:
        self._notifications = notifications
        self._templates = templates
        self._preferences = preferences
        self._dispatcher = dispatcher
        self._default_channels = list(default_channels)
        self._max_retries = max_retries

    async def execute(self, request: SendNotificationRequest) -> SendNotificationResponse:
        created: Notification | None = None
        try:
            requested_channels = request.channels or self._default_channels
            errors = validate_notification_fields(
                user_id=request.recipient_id,
                type=request.type,
                title=request.title if not request.template_id else _RESOLVED_LATER,
                message=request.content if not request.template_id else _RESOLVED_LATER,
                channels=requested_channels,
                priority=request.priority,
                template_id=request.template_id,
                scheduled_for=request.scheduled_at,
                expires_at=request.expires_at,
                metadata=request.metadata,
            )
            if errors:
                return SendNotificationResponse.failure(
                    ErrorKind.VALIDATION, f"Validation failed: {', '.join(errors)}"
                )

            channels = unique_channels(requested_channels)
            # Stores are synchronous; run them off the event loop.
            preferences = await to_thread.run_sync(
                self._preferences.find_by_user_id_and_type, request.recipient_id, request.type
            )
            if not isinstance(preferences, (list, tuple)):
                preferences = []
            enabled_channels = filter_enabled_channels(channels, preferences)
            if not enabled_channels:
                return SendNotificationResponse.failure(
                    ErrorKind.NO_ENABLED_CHANNELS, NO_CHANNELS_ERROR
                )

            title, content = request.title, request.content
            if request.template_id:
                template = await to_thread.run_sync(
                    self._templates.find_by_id, request.template_id
                )
                if template is None:
                    return SendNotificationResponse.failure(
                        ErrorKind.TEMPLATE_NOT_FOUND, TEMPLATE_NOT_FOUND_ERROR
                    )
                variables = request.template_variables or {}
                title = template.render_subject(variables) or title
                content = template.render(variables)

            notification = Notification.create(
                user_id=request.recipient_id,
                type=request.type,
                title=title,
                message=content,
                channels=enabled_channels,
                priority=request.priority,
                template_id=request.template_id,
                scheduled_for=request.scheduled_at,
                expires_at=request.expires_at,
                metadata=request.metadata,
                max_retries=self._max_retries,
            )
            created = await to_thread.run_sync(self._notifications.create, notification)

            deliveries = await self._dispatcher.dispatch(
                created, enabled_channels, request.recipient_id
            )
            all_successful = all(delivery.success for delivery in deliveries)

            outcome = created.with_delivery_data(_delivery_data(deliveries))
            if all_successful:
                outcome = outcome.mark_as_sent()
            else:
                first_error = next(
                    (delivery.error for delivery in deliveries if not delivery.success), None
                )
                outcome = outcome.mark_as_failed(first_error or "Delivery failed")
            updated = await to_thread.run_sync(self._notifications.update, outcome)
            created = updated

            logger.info(
                "Notification %s for %s finished with status %s",
                updated.id,
                updated.user_id,
                updated.status.value,
            )
            return SendNotificationResponse(
                success=all_successful,
                notification=NotificationMapper.to_response(updated),
                message=SUCCESS_MESSAGE if all_successful else PARTIAL_FAILURE_MESSAGE,
                error_kind=None if all_successful else ErrorKind.DELIVERY_FAILED,
                deliveries=[
                    ChannelDeliveryResponse(
                        channel=delivery.channel.value,
                        success=delivery.success,
                        message_id=delivery.result.message_id,
                        error=delivery.error,
                    )
                    for delivery in deliveries
                ],
            )
        except DomainError as exc:
            return SendNotificationResponse.failure(exc.kind, exc.message, created)
        except Exception as exc:
            logger.exception("Unexpected failure while sending notification")
            return SendNotificationResponse.failure(
                ErrorKind.INTERNAL, str(exc) or UNKNOWN_ERROR, created
            )


def _delivery_data(deliveries: Sequence[ChannelDelivery]) -> dict[str, Any]:
    return {
        delivery.channel.value: {
            "success": delivery.success,
            "messageId": delivery.result.message_id,
            "error": delivery.error,
        }
        for delivery in deliveries
    }


__all__ = [
    "ChannelDeliveryResponse",
    "NO_CHANNELS_ERROR",
    "PARTIAL_FAILURE_MESSAGE",
    "SUCCESS_MESSAGE",
    "SendNotificationRequest",
    "SendNotificationResponse",
    "SendNotificationUseCase",
    "TEMPLATE_NOT_FOUND_ERROR",
    "filter_enabled_channels",
]
