"""Utility helpers to push notifications to websocket subscribers."""

from __future__ import annotations

from typing import Any

from notifyhub.domain.entities import Notification

from .manager import NotificationConnectionManager


def serialize_notification(
    notification: Notification, *, include_status: bool = True
) -> dict[str, Any]:
    """Return the websocket payload representation for ``notification``.

    Live pushes happen while delivery is still running, so they leave out
    ``status``; the stored status is sent with the ``init`` message.
    """

    def _iso(value):
        return value.isoformat() if value else None

    payload = {
        "id": notification.id,
        "user_id": notification.user_id,
        "type": notification.type.value,
        "title": notification.title,
        "message": notification.message,
        "channels": [channel.value for channel in notification.channels],
        "status": notification.status.value,
        "priority": notification.priority.value,
        "metadata": dict(notification.metadata or {}),
        "created_at": _iso(notification.created_at),
        "read_at": _iso(notification.read_at),
    }
    if not include_status:
        del payload["status"]
    return payload


class NotificationPublisher:
    """Serialize notifications and deliver them to their user's sockets."""

    def __init__(self, manager: NotificationConnectionManager) -> None:
        self._manager = manager

    async def publish(self, notification: Notification) -> int:
        """Send ``notification`` to its user and return how many sockets got it."""

        message = {
            "type": "notification",
            "data": serialize_notification(notification, include_status=False),
        }
        return await self._manager.send_to_user(notification.user_id, message)


__all__ = ["NotificationPublisher", "serialize_notification"]
