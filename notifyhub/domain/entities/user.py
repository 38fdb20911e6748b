"""Domain entity representing an account able to sign in."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .user_role import UserRole

ADMIN_ROLE_NAME = "admin"


@dataclass
class User:
    """Core attributes describing an application user."""

    id: str | None
    role: UserRole
    name: str
    email: str
    password: str
    is_active: bool = True
    last_login: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def has_role(self, name: str) -> bool:
        """Return ``True`` when the user's primary role matches ``name``."""

        return self.role.name == name.strip().lower()

    def is_admin(self) -> bool:
        """Return ``True`` when the user is an administrator."""

        return self.has_role(ADMIN_ROLE_NAME) or self.role.has_admin_permissions()


__all__ = ["ADMIN_ROLE_NAME", "User"]
