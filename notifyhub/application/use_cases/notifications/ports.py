"""Collaborator interfaces consumed by the notification use cases."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Protocol

from notifyhub.domain.entities import (
    Notification,
    NotificationChannel,
    NotificationPreference,
    NotificationStatus,
    NotificationTemplate,
    NotificationType,
)
from notifyhub.infrastructure.providers import NotificationProvider


class NotificationStore(Protocol):
    def find_by_id(self, notification_id: str) -> Notification | None: ...

    def find_by_user_id(
        self,
        user_id: str,
        *,
        status: NotificationStatus | str | None = None,
        type: NotificationType | str | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> Sequence[Notification]: ...

    def create(self, notification: Notification) -> Notification: ...

    def update(self, notification: Notification) -> Notification: ...

    def delete(self, notification_id: str) -> bool: ...

    def count_by_status(self, user_id: str) -> dict[str, int]: ...

    def get_unread_count(self, user_id: str) -> int: ...

    def mark_as_read(self, notification_ids: Iterable[str], *, user_id: str) -> int: ...

    def mark_all_as_read(self, user_id: str) -> int: ...

    def delete_expired(self) -> int: ...

    def delete_older_than(self, date: datetime) -> int: ...


class TemplateStore(Protocol):
    def find_by_id(self, template_id: str) -> NotificationTemplate | None: ...

    def find_by_slug(self, slug: str) -> NotificationTemplate | None: ...

    def list(self, *, active_only: bool = False) -> Sequence[NotificationTemplate]: ...

    def create(self, template: NotificationTemplate) -> NotificationTemplate: ...


class PreferenceStore(Protocol):
    def find_by_user_id(self, user_id: str) -> Sequence[NotificationPreference]: ...

    def find_by_user_id_and_type(
        self, user_id: str, type: NotificationType | str
    ) -> Sequence[NotificationPreference]: ...

    def find_one(
        self, user_id: str, type: NotificationType | str
    ) -> NotificationPreference | None: ...

    def save(self, preference: NotificationPreference) -> NotificationPreference: ...


class ProviderLookup(Protocol):
    def get(self, channel: NotificationChannel | str) -> NotificationProvider | None: ...


__all__ = ["NotificationStore", "PreferenceStore", "ProviderLookup", "TemplateStore"]
