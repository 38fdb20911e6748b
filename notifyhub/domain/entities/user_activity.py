"""Domain entity recording something a user did."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

from notifyhub.utils import now_in_app_timezone

PROFILE_ACTIVITY_TYPES = frozenset({"profile_update", "avatar_upload", "profile_view"})
ROLE_ACTIVITY_TYPES = frozenset({"role_assign", "role_revoke", "permission_change"})


@dataclass(frozen=True)
class UserActivity:
    """Entry of the per-user activity log."""

    id: str
    user_id: str
    type: str
    action: str
    description: str | None = None
    resource: str | None = None
    resource_id: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    ip_address: str | None = None
    user_agent: str | None = None
    created_at: datetime | None = None

    @classmethod
    def create(
        cls,
        *,
        user_id: str,
        type: str,
        action: str,
        description: str | None = None,
        resource: str | None = None,
        resource_id: str | None = None,
        metadata: dict[str, Any] | None = None,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> "UserActivity":
        return cls(
            id=str(uuid.uuid4()),
            user_id=user_id,
            type=type.strip().lower(),
            action=action.strip().lower(),
            description=description.strip() if description else None,
            resource=resource.strip().lower() if resource else None,
            resource_id=resource_id,
            metadata=dict(metadata or {}),
            ip_address=ip_address.strip() if ip_address else None,
            user_agent=user_agent.strip() if user_agent else None,
            created_at=now_in_app_timezone(),
        )

    @classmethod
    def profile_update(
        cls,
        *,
        user_id: str,
        updated_fields: list[str],
        previous_values: dict[str, Any],
        new_values: dict[str, Any],
        performed_by: str | None = None,
    ) -> "UserActivity":
        return cls.create(
            user_id=user_id,
            type="profile_update",
            action="update",
            description=f"Updated profile fields: {', '.join(updated_fields)}",
            resource="user_profile",
            resource_id=user_id,
            metadata={
                "updatedFields": updated_fields,
                "previousValues": previous_values,
                "newValues": new_values,
                "performedBy": performed_by or user_id,
            },
        )

    @classmethod
    def profile_view(cls, *, user_id: str, viewer_id: str) -> "UserActivity":
        return cls.create(
            user_id=user_id,
            type="profile_view",
            action="view",
            description="Profile viewed",
            resource="user_profile",
            resource_id=user_id,
            metadata={"viewerId": viewer_id},
        )

    @classmethod
    def role_change(
        cls, *, user_id: str, role_id: str, action: str, performed_by: str | None
    ) -> "UserActivity":
        return cls.create(
            user_id=user_id,
            type="role_assign" if action == "assign" else "role_revoke",
            action=action,
            resource="user_role",
            resource_id=role_id,
            metadata={"performedBy": performed_by},
        )

    def is_profile_activity(self) -> bool:
        return self.type in PROFILE_ACTIVITY_TYPES

    def is_role_activity(self) -> bool:
        return self.type in ROLE_ACTIVITY_TYPES

    def is_recent(self, minutes: int = 60, now: datetime | None = None) -> bool:
        if self.created_at is None:
            return False
        return (now or now_in_app_timezone()) - self.created_at <= timedelta(minutes=minutes)


__all__ = ["UserActivity"]
