"""Use cases reading and updating notification preferences."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from notifyhub.domain.entities import (
    NotificationChannel,
    NotificationFrequency,
    NotificationPreference,
    NotificationType,
)
from notifyhub.domain.errors import DomainError, ErrorKind
from notifyhub.domain.result import Err, Ok, Result

from ..errors import unexpected_error
from .ports import PreferenceStore

logger = logging.getLogger(__name__)


@dataclass
class UpdatePreferenceRequest:
    user_id: str
    type: NotificationType | str = NotificationType.GENERAL
    channel: NotificationChannel | str | None = None
    enabled: bool | None = None
    frequency: NotificationFrequency | str | None = None
    quiet_hours_enabled: bool | None = None
    quiet_hours_start: str | None = None
    quiet_hours_end: str | None = None
    timezone: str | None = None


class GetNotificationPreferencesUseCase:
    """Return the stored preferences of a user.

    Users without any stored preference get the (unsaved) general defaults.
    """

    def __init__(self, preferences: PreferenceStore) -> None:
        self._preferences = preferences

    def execute(self, user_id: str) -> Result[list[NotificationPreference]]:
        try:
            stored = list(self._preferences.find_by_user_id(user_id))
            if not stored:
                stored = [NotificationPreference.create(user_id=user_id)]
            return Ok(stored)
        except DomainError as exc:
            return Err(exc)
        except Exception as exc:
            logger.exception("Failed to load notification preferences of %s", user_id)
            return unexpected_error(exc)


class UpdateNotificationPreferenceUseCase:
    """Create or update the preference of a user for one notification type."""

    def __init__(self, preferences: PreferenceStore) -> None:
        self._preferences = preferences

    def execute(self, request: UpdatePreferenceRequest) -> Result[NotificationPreference]:
        try:
            notification_type = _parse(NotificationType, request.type, "type")
            if (request.channel is None) != (request.enabled is None):
                return Err.of(
                    ErrorKind.VALIDATION,
                    "Validation failed: channel: Channel and enabled must be provided together",
                )

            preference = self._preferences.find_one(request.user_id, notification_type)
            if preference is None:
                preference = NotificationPreference.create(
                    user_id=request.user_id, type=notification_type
                )

            if request.channel is not None:
                channel = _parse(NotificationChannel, request.channel, "channel")
                preference = preference.with_channel(channel, bool(request.enabled))
            if request.frequency is not None:
                preference = preference.with_frequency(
                    _parse(NotificationFrequency, request.frequency, "frequency")
                )
            if request.quiet_hours_enabled is not None:
                preference = preference.with_quiet_hours(
                    enabled=request.quiet_hours_enabled,
                    start=request.quiet_hours_start,
                    end=request.quiet_hours_end,
                    timezone=request.timezone,
                )

            return Ok(self._preferences.save(preference))
        except DomainError as exc:
            return Err(exc)
        except Exception as exc:
            logger.exception("Failed to update notification preference of %s", request.user_id)
            return unexpected_error(exc)


def _parse(enum_cls, value, label: str):
    try:
        return enum_cls(value)
    except ValueError:
        raise DomainError(
            ErrorKind.VALIDATION, f"Validation failed: {label}: Unknown value {value}"
        ) from None


__all__ = [
    "GetNotificationPreferencesUseCase",
    "UpdateNotificationPreferenceUseCase",
    "UpdatePreferenceRequest",
]
