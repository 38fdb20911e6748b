"""ORM models used by the application infrastructure."""

from .notification import NotificationModel, NotificationPreferenceModel, NotificationTemplateModel
from .role import RoleAssignmentModel, RoleModel
from .user import UserActivityModel, UserModel, UserProfileModel

__all__ = [
    "NotificationModel",
    "NotificationPreferenceModel",
    "NotificationTemplateModel",
    "RoleAssignmentModel",
    "RoleModel",
    "UserActivityModel",
    "UserModel",
    "UserProfileModel",
]
