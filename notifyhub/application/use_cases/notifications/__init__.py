"""Use cases for sending, reading and maintaining notifications."""

from .dispatcher import ChannelDispatcher, DispatchMode
from .get_notifications import (
    DEFAULT_LIMIT,
    GetNotificationsRequest,
    GetNotificationsResponse,
    GetNotificationsUseCase,
)
from .manage_notifications import (
    CancelNotificationUseCase,
    CleanupNotificationsUseCase,
    CleanupSummary,
    DeleteNotificationUseCase,
    GetNotificationStatsUseCase,
    MarkAllNotificationsReadUseCase,
    NotificationStats,
)
from .mapper import NotificationMapper, NotificationResponse
from .mark_notification_read import (
    MarkNotificationReadRequest,
    MarkNotificationReadUseCase,
    NotificationResult,
)
from .preferences import (
    GetNotificationPreferencesUseCase,
    UpdateNotificationPreferenceUseCase,
    UpdatePreferenceRequest,
)
from .send_notification import (
    ChannelDeliveryResponse,
    SendNotificationRequest,
    SendNotificationResponse,
    SendNotificationUseCase,
    filter_enabled_channels,
)
from .templates import (
    CreateNotificationTemplateUseCase,
    CreateTemplateRequest,
    ListNotificationTemplatesUseCase,
)

__all__ = [
    "CancelNotificationUseCase",
    "ChannelDeliveryResponse",
    "ChannelDispatcher",
    "CleanupNotificationsUseCase",
    "CleanupSummary",
    "CreateNotificationTemplateUseCase",
    "CreateTemplateRequest",
    "DEFAULT_LIMIT",
    "DeleteNotificationUseCase",
    "DispatchMode",
    "GetNotificationPreferencesUseCase",
    "GetNotificationStatsUseCase",
    "GetNotificationsRequest",
    "GetNotificationsResponse",
    "GetNotificationsUseCase",
    "ListNotificationTemplatesUseCase",
    "MarkAllNotificationsReadUseCase",
    "MarkNotificationReadRequest",
    "MarkNotificationReadUseCase",
    "NotificationMapper",
    "NotificationResponse",
    "NotificationResult",
    "NotificationStats",
    "SendNotificationRequest",
    "SendNotificationResponse",
    "SendNotificationUseCase",
    "UpdateNotificationPreferenceUseCase",
    "UpdatePreferenceRequest",
    "filter_enabled_channels",
]
