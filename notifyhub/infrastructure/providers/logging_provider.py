"""Provider that only records deliveries in the application log."""

from __future__ import annotations

import logging
import uuid

from notifyhub.domain.entities import (
    DeliveryResult,
    Notification,
    NotificationChannel,
    NotificationPriority,
)

logger = logging.getLogger(__name__)


class LoggingProvider:
    """Log notifications instead of delivering them.

    Used for channels without a configured gateway, typically in development.
    """

    def __init__(
        self, channel: NotificationChannel | str, logger_: logging.Logger | None = None
    ) -> None:
        self.channel = NotificationChannel(channel)
        self.name = f"log_{self.channel.value}"
        self._logger = logger_ or logger

    def is_available(self) -> bool:
        return True

    async def send(self, notification: Notification, recipient: str) -> DeliveryResult:
        text = f"[{self.channel.value}][{notification.priority.value}] {notification.title} -> {recipient}"
        if notification.priority is NotificationPriority.URGENT:
            self._logger.warning(text)
        else:
            self._logger.info(text)
        return DeliveryResult.ok(f"{self.channel.value}_{uuid.uuid4()}")


__all__ = ["LoggingProvider"]
