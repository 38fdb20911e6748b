"""Provider that pushes notifications to connected websocket clients."""

from __future__ import annotations

import logging
import uuid

from notifyhub.domain.entities import DeliveryResult, Notification, NotificationChannel
from notifyhub.infrastructure.notifications import NotificationPublisher

logger = logging.getLogger(__name__)


class InAppProvider:
    """Deliver notifications inside the application.

    The notification row itself is the inbox entry; delivery succeeds even when
    the user has no open websocket, in which case the client picks it up on the
    next connection.
    """

    channel = NotificationChannel.IN_APP
    name = "in_app"

    def __init__(self, publisher: NotificationPublisher) -> None:
        self._publisher = publisher

    def is_available(self) -> bool:
        return True

    async def send(self, notification: Notification, recipient: str) -> DeliveryResult:
        pushed = await self._publisher.publish(notification)
        message_id = f"inapp_{uuid.uuid4()}"
        logger.debug(
            "In-app notification %s stored for %s (%d live connections)",
            notification.id,
            recipient,
            pushed,
        )
        return DeliveryResult.ok(message_id, live_connections=pushed)


__all__ = ["InAppProvider"]
