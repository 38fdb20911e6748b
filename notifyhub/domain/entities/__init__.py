"""Domain entities exposed by the application."""

from .delivery import ChannelDelivery, DeliveryResult
from .notification import (
    Notification,
    NotificationChannel,
    NotificationFrequency,
    NotificationPriority,
    NotificationStatus,
    NotificationType,
    is_valid_identifier,
    unique_channels,
    validate_notification_fields,
)
from .notification_preference import NotificationPreference
from .notification_template import NotificationTemplate
from .user import ADMIN_ROLE_NAME, User
from .user_activity import UserActivity
from .user_profile import UserProfile
from .user_role import UserRole, UserRoleAssignment

__all__ = [
    "ADMIN_ROLE_NAME",
    "ChannelDelivery",
    "DeliveryResult",
    "Notification",
    "NotificationChannel",
    "NotificationFrequency",
    "NotificationPreference",
    "NotificationPriority",
    "NotificationStatus",
    "NotificationTemplate",
    "NotificationType",
    "User",
    "UserActivity",
    "UserProfile",
    "UserRole",
    "UserRoleAssignment",
    "is_valid_identifier",
    "unique_channels",
    "validate_notification_fields",
]
