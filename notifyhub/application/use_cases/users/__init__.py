"""Use cases for authentication, profiles and roles."""

from .authenticate_user import AuthenticationStatus, authenticate_user
from .create_user import create_user, ensure_admin_role
from .profile import (
    NO_CHANGES_ERROR,
    UserProfileView,
    get_user_profile,
    list_user_activity,
    update_user_profile,
)
from .record_login import record_login
from .roles import (
    activate_role,
    assign_role,
    create_role,
    deactivate_role,
    delete_role,
    get_role,
    list_roles,
    list_user_roles,
    revoke_role_assignment,
    update_role,
)

__all__ = [
    "AuthenticationStatus",
    "NO_CHANGES_ERROR",
    "UserProfileView",
    "activate_role",
    "assign_role",
    "authenticate_user",
    "create_role",
    "create_user",
    "deactivate_role",
    "delete_role",
    "ensure_admin_role",
    "get_role",
    "get_user_profile",
    "list_roles",
    "list_user_activity",
    "list_user_roles",
    "record_login",
    "revoke_role_assignment",
    "update_role",
    "update_user_profile",
]
