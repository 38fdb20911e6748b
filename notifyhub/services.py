"""Assembly of providers, dispatcher and per-request notification services."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from notifyhub.application.use_cases.notifications import (
    CancelNotificationUseCase,
    ChannelDispatcher,
    CleanupNotificationsUseCase,
    CreateNotificationTemplateUseCase,
    DeleteNotificationUseCase,
    GetNotificationPreferencesUseCase,
    GetNotificationStatsUseCase,
    GetNotificationsUseCase,
    ListNotificationTemplatesUseCase,
    MarkAllNotificationsReadUseCase,
    MarkNotificationReadUseCase,
    SendNotificationUseCase,
    UpdateNotificationPreferenceUseCase,
)
from notifyhub.config import Settings
from notifyhub.domain.entities import NotificationChannel
from notifyhub.infrastructure.database import SessionLocal
from notifyhub.infrastructure.notifications import (
    NotificationConnectionManager,
    NotificationPublisher,
)
from notifyhub.infrastructure.providers import (
    InAppProvider,
    LoggingProvider,
    ProviderRegistry,
    SendGridEmailProvider,
)
from notifyhub.infrastructure.repositories import (
    NotificationPreferenceRepository,
    NotificationRepository,
    NotificationTemplateRepository,
    UserRepository,
)

logger = logging.getLogger(__name__)


def resolve_user_email(user_id: str) -> str | None:
    """Return the email address of ``user_id`` using a short-lived session."""

    with SessionLocal() as session:
        user = UserRepository(session).get(user_id)
        return user.email if user else None


def build_provider_registry(
    settings: Settings, manager: NotificationConnectionManager
) -> ProviderRegistry:
    """Return the registry of providers available to this process."""

    registry = ProviderRegistry([InAppProvider(NotificationPublisher(manager))])
    registry.register(SendGridEmailProvider(settings, resolve_user_email))
    for channel in settings.notification_log_only_channels:
        registry.register(LoggingProvider(NotificationChannel(channel)))
    logger.info(
        "Notification providers ready for channels: %s",
        ", ".join(channel.value for channel in registry.channels()) or "none",
    )
    return registry


def build_dispatcher(settings: Settings, registry: ProviderRegistry) -> ChannelDispatcher:
    return ChannelDispatcher(
        registry,
        mode=settings.notification_dispatch_mode,
        timeout=settings.notification_provider_timeout_seconds,
    )


@dataclass(frozen=True)
class NotificationServices:
    """Use cases bound to one database session."""

    send: SendNotificationUseCase
    list: GetNotificationsUseCase
    mark_read: MarkNotificationReadUseCase
    mark_all_read: MarkAllNotificationsReadUseCase
    delete: DeleteNotificationUseCase
    cancel: CancelNotificationUseCase
    stats: GetNotificationStatsUseCase
    get_preferences: GetNotificationPreferencesUseCase
    update_preference: UpdateNotificationPreferenceUseCase
    create_template: CreateNotificationTemplateUseCase
    list_templates: ListNotificationTemplatesUseCase
    cleanup: CleanupNotificationsUseCase


def build_notification_services(
    session: Session,
    dispatcher: ChannelDispatcher,
    settings: Settings,
) -> NotificationServices:
    """Wire the notification use cases to repositories on ``session``."""

    notifications = NotificationRepository(session)
    templates = NotificationTemplateRepository(session)
    preferences = NotificationPreferenceRepository(session)
    return NotificationServices(
        send=SendNotificationUseCase(
            notifications,
            templates,
            preferences,
            dispatcher,
            default_channels=settings.notification_default_channels,
            max_retries=settings.notification_max_retries,
        ),
        list=GetNotificationsUseCase(notifications),
        mark_read=MarkNotificationReadUseCase(notifications),
        mark_all_read=MarkAllNotificationsReadUseCase(notifications),
        delete=DeleteNotificationUseCase(notifications),
        cancel=CancelNotificationUseCase(notifications),
        stats=GetNotificationStatsUseCase(notifications),
        get_preferences=GetNotificationPreferencesUseCase(preferences),
        update_preference=UpdateNotificationPreferenceUseCase(preferences),
        create_template=CreateNotificationTemplateUseCase(templates),
        list_templates=ListNotificationTemplatesUseCase(templates),
        cleanup=CleanupNotificationsUseCase(
            notifications, retention_days=settings.notification_retention_days
        ),
    )


__all__ = [
    "NotificationServices",
    "build_dispatcher",
    "build_notification_services",
    "build_provider_registry",
    "resolve_user_email",
]
