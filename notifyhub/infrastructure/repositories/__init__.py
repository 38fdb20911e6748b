"""Repository implementations for infrastructure layer."""

from .notification_preference_repository import NotificationPreferenceRepository
from .notification_repository import NotificationRepository
from .notification_template_repository import NotificationTemplateRepository
from .role_repository import RoleAssignmentRepository, RoleRepository
from .user_profile_repository import UserActivityRepository, UserProfileRepository
from .user_repository import UserRepository

__all__ = [
    "NotificationPreferenceRepository",
    "NotificationRepository",
    "NotificationTemplateRepository",
    "RoleAssignmentRepository",
    "RoleRepository",
    "UserActivityRepository",
    "UserProfileRepository",
    "UserRepository",
]
