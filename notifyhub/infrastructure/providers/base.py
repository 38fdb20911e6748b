"""Interface implemented by every channel provider."""

from __future__ import annotations

from typing import Protocol

from notifyhub.domain.entities import DeliveryResult, Notification, NotificationChannel


class NotificationProvider(Protocol):
    """Delivers notifications through one channel."""

    channel: NotificationChannel
    name: str

    def is_available(self) -> bool:  # pragma: no cover - Protocol
        ...

    async def send(
        self, notification: Notification, recipient: str
    ) -> DeliveryResult:  # pragma: no cover - Protocol
        ...


__all__ = ["NotificationProvider"]
