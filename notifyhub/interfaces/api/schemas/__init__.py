from .auth import Token
from .notification import (
    ChannelDeliveryRead,
    CleanupRead,
    NotificationActionResult,
    NotificationCountResult,
    NotificationListResponse,
    NotificationPreferenceRead,
    NotificationPreferenceUpdate,
    NotificationRead,
    NotificationStatsRead,
    NotificationTemplateCreate,
    NotificationTemplateRead,
    SendNotificationPayload,
    SendNotificationResult,
)
from .user import (
    ProfileUpdateResult,
    RoleAssignmentCreate,
    RoleAssignmentRead,
    RoleCreate,
    RoleRead,
    RoleUpdate,
    UserActivityRead,
    UserProfileDetail,
    UserProfileRead,
    UserProfileUpdate,
    UserRead,
)

__all__ = [
    "ChannelDeliveryRead",
    "CleanupRead",
    "NotificationActionResult",
    "NotificationCountResult",
    "NotificationListResponse",
    "NotificationPreferenceRead",
    "NotificationPreferenceUpdate",
    "NotificationRead",
    "NotificationStatsRead",
    "NotificationTemplateCreate",
    "NotificationTemplateRead",
    "ProfileUpdateResult",
    "RoleAssignmentCreate",
    "RoleAssignmentRead",
    "RoleCreate",
    "RoleRead",
    "RoleUpdate",
    "SendNotificationPayload",
    "SendNotificationResult",
    "Token",
    "UserActivityRead",
    "UserProfileDetail",
    "UserProfileRead",
    "UserProfileUpdate",
    "UserRead",
]
