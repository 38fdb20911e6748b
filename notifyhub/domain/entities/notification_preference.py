"""Domain entity storing which channels a user accepts for a notification type."""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, time
from typing import Any

from notifyhub.domain.errors import DomainError, ErrorKind
from notifyhub.utils import advance_past, now_in_app_timezone, resolve_timezone

from .notification import NotificationChannel, NotificationFrequency, NotificationType

_TIME_PATTERN = re.compile(r"^([01]?[0-9]|2[0-3]):([0-5][0-9])$")

_CHANNEL_FLAGS: dict[NotificationChannel, str] = {
    NotificationChannel.EMAIL: "email_enabled",
    NotificationChannel.SMS: "sms_enabled",
    NotificationChannel.PUSH: "push_enabled",
    NotificationChannel.IN_APP: "in_app_enabled",
}


def parse_clock(value: str) -> time:
    """Parse an ``HH:MM`` string or raise ``DomainError``."""

    match = _TIME_PATTERN.match(value or "")
    if not match:
        raise DomainError(ErrorKind.VALIDATION, "Invalid time format, use HH:MM")
    return time(int(match.group(1)), int(match.group(2)))


@dataclass(frozen=True)
class NotificationPreference:
    """Channel switches and delivery window for one user and notification type."""

    id: str
    user_id: str
    type: NotificationType
    email_enabled: bool = True
    sms_enabled: bool = False
    push_enabled: bool = True
    in_app_enabled: bool = True
    frequency: NotificationFrequency = NotificationFrequency.IMMEDIATE
    quiet_hours_enabled: bool = False
    quiet_hours_start: str | None = None
    quiet_hours_end: str | None = None
    timezone: str = "UTC"
    metadata: dict[str, Any] = field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def create(
        cls,
        *,
        user_id: str,
        type: NotificationType | str = NotificationType.GENERAL,
        **flags: Any,
    ) -> "NotificationPreference":
        now = now_in_app_timezone()
        preference = cls(
            id=str(uuid.uuid4()),
            user_id=user_id,
            type=NotificationType(type),
            created_at=now,
            updated_at=now,
            **flags,
        )
        preference._validate_quiet_hours()
        return preference

    def is_channel_enabled(self, channel: NotificationChannel | str) -> bool:
        """Return whether ``channel`` is switched on; unknown channels are allowed."""

        try:
            flag = _CHANNEL_FLAGS.get(NotificationChannel(channel))
        except ValueError:
            return True
        if flag is None:
            return True
        return bool(getattr(self, flag))

    def with_channel(self, channel: NotificationChannel | str, enabled: bool) -> "NotificationPreference":
        flag = _CHANNEL_FLAGS.get(NotificationChannel(channel))
        if flag is None:
            raise DomainError(
                ErrorKind.VALIDATION,
                f"Channel {NotificationChannel(channel).value} has no preference switch",
            )
        return self._touch(**{flag: enabled})

    def with_frequency(self, frequency: NotificationFrequency | str) -> "NotificationPreference":
        return self._touch(frequency=NotificationFrequency(frequency))

    def with_quiet_hours(
        self,
        *,
        enabled: bool,
        start: str | None = None,
        end: str | None = None,
        timezone: str | None = None,
    ) -> "NotificationPreference":
        updated = self._touch(
            quiet_hours_enabled=enabled,
            quiet_hours_start=start if start is not None else self.quiet_hours_start,
            quiet_hours_end=end if end is not None else self.quiet_hours_end,
            timezone=timezone or self.timezone,
        )
        updated._validate_quiet_hours()
        return updated

    def is_in_quiet_hours(self, at: datetime | None = None) -> bool:
        """Return whether ``at`` falls inside the configured quiet window."""

        if not (self.quiet_hours_enabled and self.quiet_hours_start and self.quiet_hours_end):
            return False

        moment = (at or now_in_app_timezone()).astimezone(resolve_timezone(self.timezone))
        current = moment.time().replace(second=0, microsecond=0)
        start = parse_clock(self.quiet_hours_start)
        end = parse_clock(self.quiet_hours_end)
        if start <= end:
            return start <= current <= end
        # Window wraps past midnight.
        return current >= start or current <= end

    def _validate_quiet_hours(self) -> None:
        if not self.quiet_hours_enabled:
            return
        if not (self.quiet_hours_start and self.quiet_hours_end):
            raise DomainError(
                ErrorKind.VALIDATION, "Quiet hours require both a start and an end time"
            )
        parse_clock(self.quiet_hours_start)
        parse_clock(self.quiet_hours_end)

    def _touch(self, **changes: Any) -> "NotificationPreference":
        return replace(self, updated_at=advance_past(self.updated_at), **changes)


__all__ = ["NotificationPreference", "parse_clock"]
