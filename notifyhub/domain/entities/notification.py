"""Domain entity representing a notification and its delivery lifecycle."""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Iterable, Sequence

from notifyhub.domain.errors import DomainError, ErrorKind
from notifyhub.utils import advance_past, now_in_app_timezone


class NotificationType(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
    SYSTEM = "system"
    GENERAL = "general"


class NotificationChannel(str, Enum):
    EMAIL = "email"
    SMS = "sms"
    PUSH = "push"
    IN_APP = "in_app"
    WEBHOOK = "webhook"


class NotificationStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SENT = "sent"
    DELIVERED = "delivered"
    READ = "read"
    FAILED = "failed"
    CANCELLED = "cancelled"


class NotificationPriority(str, Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"


class NotificationFrequency(str, Enum):
    IMMEDIATE = "immediate"
    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"


TERMINAL_STATUSES = frozenset(
    {NotificationStatus.SENT, NotificationStatus.FAILED, NotificationStatus.CANCELLED}
)

MAX_TITLE_LENGTH = 255
MAX_MESSAGE_LENGTH = 2000
DEFAULT_MAX_RETRIES = 3

_IDENTIFIER_PATTERN = re.compile(r"[A-Za-z0-9][A-Za-z0-9_-]{0,63}")


def is_valid_identifier(value: Any) -> bool:
    """Return ``True`` when ``value`` looks like an opaque entity identifier."""

    return isinstance(value, str) and bool(_IDENTIFIER_PATTERN.fullmatch(value))


def _enum_values(enum_cls: type[Enum]) -> str:
    return ", ".join(member.value for member in enum_cls)


def validate_notification_fields(
    *,
    user_id: Any,
    type: Any,
    title: Any,
    message: Any,
    channels: Sequence[Any] | None,
    priority: Any = None,
    template_id: Any = None,
    scheduled_for: Any = None,
    expires_at: Any = None,
    metadata: Any = None,
) -> list[str]:
    """Return every problem found in the provided notification fields.

    Messages use the ``field: problem`` format. An empty list means the values
    can be used to build a :class:`Notification`.
    """

    errors: list[str] = []

    if not user_id:
        errors.append("userId: Recipient is required")
    elif not is_valid_identifier(user_id):
        errors.append("userId: Invalid identifier format")

    if _coerce_enum(NotificationType, type) is None:
        errors.append(
            f"type: Invalid notification type, expected one of {_enum_values(NotificationType)}"
        )

    if not isinstance(title, str) or not title.strip():
        errors.append("title: Title is required")
    elif len(title) > MAX_TITLE_LENGTH:
        errors.append(f"title: Title must be at most {MAX_TITLE_LENGTH} characters")

    if not isinstance(message, str) or not message.strip():
        errors.append("message: Message is required")
    elif len(message) > MAX_MESSAGE_LENGTH:
        errors.append(f"message: Message must be at most {MAX_MESSAGE_LENGTH} characters")

    if not channels:
        errors.append("channels: At least one channel is required")
    else:
        for index, channel in enumerate(channels):
            if _coerce_enum(NotificationChannel, channel) is None:
                errors.append(
                    f"channels.{index}: Invalid channel, expected one of "
                    f"{_enum_values(NotificationChannel)}"
                )

    if priority is not None and _coerce_enum(NotificationPriority, priority) is None:
        errors.append(
            f"priority: Invalid priority, expected one of {_enum_values(NotificationPriority)}"
        )

    if template_id is not None and not is_valid_identifier(template_id):
        errors.append("templateId: Invalid identifier format")

    if scheduled_for is not None and not isinstance(scheduled_for, datetime):
        errors.append("scheduledFor: Expected a datetime")

    if expires_at is not None and not isinstance(expires_at, datetime):
        errors.append("expiresAt: Expected a datetime")

    if metadata is not None and not isinstance(metadata, dict):
        errors.append("metadata: Expected an object")

    return errors


def _coerce_enum(enum_cls, value):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        return None


def unique_channels(channels: Iterable[Any]) -> list[NotificationChannel]:
    """Return ``channels`` converted to enum members, keeping first occurrences."""

    result: list[NotificationChannel] = []
    for channel in channels:
        member = NotificationChannel(channel)
        if member not in result:
            result.append(member)
    return result


@dataclass(frozen=True)
class Notification:
    """Message destined for one user across one or more channels.

    Instances are immutable; every lifecycle transition returns a new instance
    whose ``updated_at`` is strictly later than the previous one.
    """

    id: str
    user_id: str
    type: NotificationType
    title: str
    message: str
    channels: tuple[NotificationChannel, ...]
    status: NotificationStatus = NotificationStatus.PENDING
    priority: NotificationPriority = NotificationPriority.NORMAL
    template_id: str | None = None
    scheduled_for: datetime | None = None
    sent_at: datetime | None = None
    delivered_at: datetime | None = None
    read_at: datetime | None = None
    expires_at: datetime | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    delivery_data: dict[str, Any] = field(default_factory=dict)
    retry_count: int = 0
    max_retries: int = DEFAULT_MAX_RETRIES
    last_error: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def create(
        cls,
        *,
        user_id: str,
        type: NotificationType | str,
        title: str,
        message: str,
        channels: Sequence[NotificationChannel | str],
        priority: NotificationPriority | str | None = None,
        template_id: str | None = None,
        scheduled_for: datetime | None = None,
        expires_at: datetime | None = None,
        metadata: dict[str, Any] | None = None,
        max_retries: int = DEFAULT_MAX_RETRIES,
    ) -> "Notification":
        """Build a new pending notification or raise ``DomainError``."""

        errors = validate_notification_fields(
            user_id=user_id,
            type=type,
            title=title,
            message=message,
            channels=channels,
            priority=priority,
            template_id=template_id,
            scheduled_for=scheduled_for,
            expires_at=expires_at,
            metadata=metadata,
        )
        if errors:
            raise DomainError(
                ErrorKind.VALIDATION, f"Validation failed: {', '.join(errors)}"
            )

        now = now_in_app_timezone()
        return cls(
            id=str(uuid.uuid4()),
            user_id=user_id,
            type=NotificationType(type),
            title=title,
            message=message,
            channels=tuple(unique_channels(channels)),
            status=NotificationStatus.PENDING,
            priority=NotificationPriority(priority or NotificationPriority.NORMAL),
            template_id=template_id,
            scheduled_for=scheduled_for,
            expires_at=expires_at,
            metadata=dict(metadata or {}),
            max_retries=max_retries,
            created_at=now,
            updated_at=now,
        )

    def _transition(self, **changes: Any) -> "Notification":
        return replace(self, updated_at=advance_past(self.updated_at), **changes)

    def mark_as_processing(self) -> "Notification":
        self._ensure_not_terminal(NotificationStatus.PROCESSING)
        return self._transition(status=NotificationStatus.PROCESSING)

    def mark_as_sent(self) -> "Notification":
        if self.status in (NotificationStatus.CANCELLED, NotificationStatus.FAILED):
            self._reject(NotificationStatus.SENT)
        return self._transition(
            status=NotificationStatus.SENT, sent_at=now_in_app_timezone(), last_error=None
        )

    def mark_as_delivered(self) -> "Notification":
        if self.status is NotificationStatus.CANCELLED:
            self._reject(NotificationStatus.DELIVERED)
        return self._transition(
            status=NotificationStatus.DELIVERED, delivered_at=now_in_app_timezone()
        )

    def mark_as_read(self) -> "Notification":
        # A failed notification may still have reached the inbox through another channel.
        if self.status is NotificationStatus.CANCELLED:
            self._reject(NotificationStatus.READ)
        now = now_in_app_timezone()
        return self._transition(
            status=NotificationStatus.READ,
            read_at=now,
            delivered_at=self.delivered_at or now,
        )

    def mark_as_failed(self, error: str) -> "Notification":
        if self.status is NotificationStatus.CANCELLED:
            self._reject(NotificationStatus.FAILED)
        return self._transition(status=NotificationStatus.FAILED, last_error=error)

    def mark_as_cancelled(self) -> "Notification":
        if self.status in (
            NotificationStatus.SENT,
            NotificationStatus.DELIVERED,
            NotificationStatus.READ,
        ):
            self._reject(NotificationStatus.CANCELLED)
        return self._transition(status=NotificationStatus.CANCELLED)

    def increment_retry(self) -> "Notification":
        return self._transition(retry_count=self.retry_count + 1)

    def with_delivery_data(self, delivery_data: dict[str, Any]) -> "Notification":
        return self._transition(delivery_data={**self.delivery_data, **delivery_data})

    def _ensure_not_terminal(self, target: NotificationStatus) -> None:
        if self.status in TERMINAL_STATUSES:
            self._reject(target)

    def _reject(self, target: NotificationStatus) -> None:
        raise DomainError(
            ErrorKind.BUSINESS_RULE,
            f"Cannot change notification status from {self.status.value} to {target.value}",
        )

    def is_expired(self, now: datetime | None = None) -> bool:
        if self.expires_at is None:
            return False
        return (now or now_in_app_timezone()) > self.expires_at

    def can_retry(self) -> bool:
        return self.status is NotificationStatus.FAILED and self.retry_count < self.max_retries

    def is_scheduled(self, now: datetime | None = None) -> bool:
        if self.scheduled_for is None:
            return False
        return self.scheduled_for > (now or now_in_app_timezone())

    def is_read(self) -> bool:
        return self.read_at is not None

    def is_pending(self) -> bool:
        return self.status is NotificationStatus.PENDING

    def is_sent(self) -> bool:
        return self.status is NotificationStatus.SENT

    def is_failed(self) -> bool:
        return self.status is NotificationStatus.FAILED

    def is_cancelled(self) -> bool:
        return self.status is NotificationStatus.CANCELLED

    def has_channel(self, channel: NotificationChannel | str) -> bool:
        return NotificationChannel(channel) in self.channels


__all__ = [
    "DEFAULT_MAX_RETRIES",
    "MAX_MESSAGE_LENGTH",
    "MAX_TITLE_LENGTH",
    "Notification",
    "NotificationChannel",
    "NotificationFrequency",
    "NotificationPriority",
    "NotificationStatus",
    "NotificationType",
    "TERMINAL_STATUSES",
    "is_valid_identifier",
    "unique_channels",
    "validate_notification_fields",
]
