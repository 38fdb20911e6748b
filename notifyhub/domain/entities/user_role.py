"""Domain entities describing roles and their assignment to users."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Iterable

from notifyhub.domain.errors import DomainError, ErrorKind
from notifyhub.utils import advance_past, now_in_app_timezone

READ_PERMISSIONS = frozenset(
    {"read:users", "read:profiles", "read:settings", "read:roles", "read:activities"}
)
WRITE_PERMISSIONS = frozenset(
    {"write:users", "write:profiles", "write:settings", "write:roles"}
)
ADMIN_PERMISSIONS = frozenset(
    {"admin:users", "admin:system", "admin:roles", "admin:settings"}
)
USER_MANAGEMENT_PERMISSIONS = frozenset(
    {"manage:users", "manage:roles", "manage:permissions"}
)


def normalize_permission(permission: str) -> str:
    """Return ``permission`` lower-cased and stripped."""

    return permission.strip().lower()


def normalize_permissions(permissions: Iterable[str]) -> tuple[str, ...]:
    """Normalize and de-duplicate ``permissions`` preserving their order."""

    result: list[str] = []
    for permission in permissions:
        normalized = normalize_permission(permission)
        if normalized and normalized not in result:
            result.append(normalized)
    return tuple(result)


@dataclass(frozen=True)
class UserRole:
    """Named permission set with a numeric rank."""

    id: str
    name: str
    display_name: str
    description: str | None = None
    level: int = 0
    is_system: bool = False
    permissions: tuple[str, ...] = ()
    metadata: dict[str, Any] = field(default_factory=dict)
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def create(
        cls,
        *,
        name: str,
        display_name: str,
        description: str | None = None,
        level: int = 0,
        is_system: bool = False,
        permissions: Iterable[str] = (),
        metadata: dict[str, Any] | None = None,
    ) -> "UserRole":
        normalized_name = (name or "").strip().lower()
        if not normalized_name:
            raise DomainError(ErrorKind.VALIDATION, "Validation failed: name: Role name is required")
        if not (display_name or "").strip():
            raise DomainError(
                ErrorKind.VALIDATION, "Validation failed: displayName: Display name is required"
            )
        if level < 0:
            raise DomainError(
                ErrorKind.VALIDATION, "Validation failed: level: Level must be zero or greater"
            )
        now = now_in_app_timezone()
        return cls(
            id=str(uuid.uuid4()),
            name=normalized_name,
            display_name=display_name.strip(),
            description=description.strip() if description else None,
            level=level,
            is_system=is_system,
            permissions=normalize_permissions(permissions),
            metadata=dict(metadata or {}),
            created_at=now,
            updated_at=now,
        )

    def update_info(
        self,
        *,
        display_name: str | None = None,
        description: str | None = None,
        level: int | None = None,
    ) -> "UserRole":
        self._ensure_modifiable()
        return self._touch(
            display_name=display_name.strip() if display_name else self.display_name,
            description=description.strip() if description is not None else self.description,
            level=level if level is not None else self.level,
        )

    def update_permissions(self, permissions: Iterable[str]) -> "UserRole":
        self._ensure_modifiable()
        return self._touch(permissions=normalize_permissions(permissions))

    def add_permission(self, permission: str) -> "UserRole":
        if self.has_permission(permission):
            return self
        return self.update_permissions([*self.permissions, permission])

    def remove_permission(self, permission: str) -> "UserRole":
        normalized = normalize_permission(permission)
        if normalized not in self.permissions:
            return self
        return self.update_permissions(p for p in self.permissions if p != normalized)

    def activate(self) -> "UserRole":
        if self.is_active:
            return self
        return self._touch(is_active=True)

    def deactivate(self) -> "UserRole":
        if self.is_system:
            raise DomainError(ErrorKind.BUSINESS_RULE, "Cannot deactivate system roles")
        if not self.is_active:
            return self
        return self._touch(is_active=False)

    def has_permission(self, permission: str) -> bool:
        return normalize_permission(permission) in self.permissions

    def has_any_permission(self, permissions: Iterable[str]) -> bool:
        return any(self.has_permission(permission) for permission in permissions)

    def has_all_permissions(self, permissions: Iterable[str]) -> bool:
        return all(self.has_permission(permission) for permission in permissions)

    def has_read_permissions(self) -> bool:
        return self.has_any_permission(READ_PERMISSIONS)

    def has_write_permissions(self) -> bool:
        return self.has_any_permission(WRITE_PERMISSIONS)

    def has_admin_permissions(self) -> bool:
        return self.has_any_permission(ADMIN_PERMISSIONS)

    def has_user_management_permissions(self) -> bool:
        return self.has_any_permission(USER_MANAGEMENT_PERMISSIONS)

    def can_be_deleted(self) -> bool:
        return not self.is_system

    def can_be_modified(self) -> bool:
        return not self.is_system

    def is_higher_level(self, other: "UserRole") -> bool:
        return self.level > other.level

    def is_same_level(self, other: "UserRole") -> bool:
        return self.level == other.level

    def is_lower_level(self, other: "UserRole") -> bool:
        return self.level < other.level

    def _ensure_modifiable(self) -> None:
        if not self.can_be_modified():
            raise DomainError(ErrorKind.BUSINESS_RULE, "Cannot modify system roles")

    def _touch(self, **changes: Any) -> "UserRole":
        return replace(self, updated_at=advance_past(self.updated_at), **changes)


@dataclass(frozen=True)
class UserRoleAssignment:
    """Binding between a user and a role, optionally time-limited."""

    id: str
    user_id: str
    role_id: str
    assigned_by: str | None = None
    assigned_at: datetime | None = None
    expires_at: datetime | None = None
    is_active: bool = True
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def create(
        cls,
        *,
        user_id: str,
        role_id: str,
        assigned_by: str | None = None,
        expires_at: datetime | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> "UserRoleAssignment":
        now = now_in_app_timezone()
        if expires_at is not None and expires_at <= now:
            raise DomainError(
                ErrorKind.VALIDATION,
                "Validation failed: expiresAt: Expiration must be in the future",
            )
        return cls(
            id=str(uuid.uuid4()),
            user_id=user_id,
            role_id=role_id,
            assigned_by=assigned_by,
            assigned_at=now,
            expires_at=expires_at,
            metadata=dict(metadata or {}),
        )

    def activate(self) -> "UserRoleAssignment":
        return self if self.is_active else replace(self, is_active=True)

    def deactivate(self) -> "UserRoleAssignment":
        return replace(self, is_active=False) if self.is_active else self

    def update_expiration(self, expires_at: datetime | None) -> "UserRoleAssignment":
        return replace(self, expires_at=expires_at)

    def is_expired(self, now: datetime | None = None) -> bool:
        if self.expires_at is None:
            return False
        return (now or now_in_app_timezone()) > self.expires_at

    def is_valid(self, now: datetime | None = None) -> bool:
        return self.is_active and not self.is_expired(now)


__all__ = [
    "ADMIN_PERMISSIONS",
    "READ_PERMISSIONS",
    "USER_MANAGEMENT_PERMISSIONS",
    "UserRole",
    "UserRoleAssignment",
    "WRITE_PERMISSIONS",
    "normalize_permission",
    "normalize_permissions",
]
