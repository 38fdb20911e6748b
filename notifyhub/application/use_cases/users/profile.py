"""Use cases reading and editing user profiles."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from sqlalchemy.orm import Session

from notifyhub.domain.entities import User, UserActivity, UserProfile, UserRole
from notifyhub.domain.errors import DomainError, ErrorKind
from notifyhub.domain.result import Err, Ok, Result
from notifyhub.infrastructure.repositories import (
    RoleAssignmentRepository,
    RoleRepository,
    UserActivityRepository,
    UserProfileRepository,
    UserRepository,
)

from ..errors import unexpected_error

logger = logging.getLogger(__name__)

DEFAULT_ACTIVITY_LIMIT = 10
MAX_ACTIVITY_LIMIT = 100
NO_CHANGES_ERROR = "No changes detected in profile"


@dataclass(frozen=True)
class UserProfileView:
    user: User
    profile: UserProfile
    roles: list[UserRole] = field(default_factory=list)
    recent_activity: list[UserActivity] = field(default_factory=list)


def _activity_limit(limit: int | None) -> int:
    return max(1, min(limit or DEFAULT_ACTIVITY_LIMIT, MAX_ACTIVITY_LIMIT))


def _profile_not_found(user_id: str) -> Err:
    return Err.of(ErrorKind.NOT_FOUND, f"User profile with ID {user_id} not found")


def _load_profile(session: Session, user: User) -> UserProfile:
    profile = UserProfileRepository(session).find_by_user_id(user.id)
    if profile is not None:
        return profile
    first_name, _, last_name = user.name.partition(" ")
    return UserProfile.create(
        user_id=user.id, first_name=first_name or None, last_name=last_name or None
    )


def _jsonable(value: Any) -> Any:
    if isinstance(value, date):
        return value.isoformat()
    return value


def valid_roles_for_user(session: Session, user_id: str) -> list[UserRole]:
    """Return the active roles bound to ``user_id`` through valid assignments."""

    roles = RoleRepository(session)
    result: list[UserRole] = []
    for assignment in RoleAssignmentRepository(session).list_for_user(user_id):
        if not assignment.is_valid():
            continue
        role = roles.get(assignment.role_id)
        if role is not None and role.is_active:
            result.append(role)
    return result


def get_user_profile(
    session: Session,
    user_id: str,
    *,
    viewer_id: str | None = None,
    include_roles: bool = False,
    include_activity: bool = False,
    activity_limit: int | None = None,
) -> Result[UserProfileView]:
    """Return the profile of ``user_id``, recording the view for other viewers."""

    try:
        user = UserRepository(session).get(user_id)
        if user is None:
            return _profile_not_found(user_id)

        profile = _load_profile(session, user)
        roles = valid_roles_for_user(session, user_id) if include_roles else []
        activities = UserActivityRepository(session)
        recent = (
            list(activities.list_for_user(user_id, limit=_activity_limit(activity_limit)))
            if include_activity
            else []
        )
        if viewer_id and viewer_id != user_id:
            activities.create(UserActivity.profile_view(user_id=user_id, viewer_id=viewer_id))

        return Ok(UserProfileView(user=user, profile=profile, roles=roles, recent_activity=recent))
    except DomainError as exc:
        return Err(exc)
    except Exception as exc:
        logger.exception("Failed to load profile of user %s", user_id)
        return unexpected_error(exc)


def update_user_profile(
    session: Session,
    user_id: str,
    changes: dict[str, Any],
    *,
    performed_by: str | None = None,
) -> Result[UserProfile]:
    """Apply ``changes`` to the profile of ``user_id`` and log the edit."""

    try:
        user = UserRepository(session).get(user_id)
        if user is None:
            return _profile_not_found(user_id)

        profile = _load_profile(session, user)
        diff = profile.changed_fields(changes)
        if not diff:
            return Err.of(ErrorKind.VALIDATION, NO_CHANGES_ERROR)

        updated = UserProfileRepository(session).save(
            profile.apply_changes({name: new for name, (_, new) in diff.items()})
        )
        UserActivityRepository(session).create(
            UserActivity.profile_update(
                user_id=user_id,
                updated_fields=sorted(diff),
                previous_values={name: _jsonable(old) for name, (old, _) in diff.items()},
                new_values={name: _jsonable(new) for name, (_, new) in diff.items()},
                performed_by=performed_by,
            )
        )
        logger.info("Profile of user %s updated fields %s", user_id, ", ".join(sorted(diff)))
        return Ok(updated)
    except DomainError as exc:
        return Err(exc)
    except Exception as exc:
        logger.exception("Failed to update profile of user %s", user_id)
        return unexpected_error(exc)


def list_user_activity(
    session: Session,
    user_id: str,
    *,
    limit: int | None = None,
    type: str | None = None,
) -> Result[list[UserActivity]]:
    try:
        if UserRepository(session).get(user_id) is None:
            return _profile_not_found(user_id)
        return Ok(
            list(
                UserActivityRepository(session).list_for_user(
                    user_id, limit=_activity_limit(limit), type=type
                )
            )
        )
    except Exception as exc:
        logger.exception("Failed to list activity of user %s", user_id)
        return unexpected_error(exc)


__all__ = [
    "NO_CHANGES_ERROR",
    "UserProfileView",
    "get_user_profile",
    "list_user_activity",
    "update_user_profile",
    "valid_roles_for_user",
]
