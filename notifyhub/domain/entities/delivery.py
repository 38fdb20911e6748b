"""Outcome reported by a channel provider for one delivery attempt."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .notification import NotificationChannel


@dataclass(frozen=True)
class DeliveryResult:
    """Result of sending a notification through a single channel."""

    success: bool
    message_id: str | None = None
    error: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, message_id: str | None = None, **metadata: Any) -> "DeliveryResult":
        return cls(success=True, message_id=message_id, metadata=metadata)

    @classmethod
    def failed(cls, error: str, **metadata: Any) -> "DeliveryResult":
        return cls(success=False, error=error, metadata=metadata)


@dataclass(frozen=True)
class ChannelDelivery:
    """A :class:`DeliveryResult` tagged with the channel that produced it."""

    channel: NotificationChannel
    result: DeliveryResult

    @property
    def success(self) -> bool:
        return self.result.success

    @property
    def error(self) -> str | None:
        return self.result.error


__all__ = ["ChannelDelivery", "DeliveryResult"]
