"""Use cases managing roles and their assignment to users."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Iterable

from sqlalchemy.orm import Session

from notifyhub.domain.entities import UserActivity, UserRole, UserRoleAssignment
from notifyhub.domain.errors import DomainError, ErrorKind
from notifyhub.domain.result import Err, Ok, Result
from notifyhub.infrastructure.repositories import (
    RoleAssignmentRepository,
    RoleRepository,
    UserActivityRepository,
    UserRepository,
)
from notifyhub.utils import ensure_app_timezone

from ..errors import unexpected_error
from .profile import valid_roles_for_user

logger = logging.getLogger(__name__)


def _role_not_found(role_id: str) -> DomainError:
    return DomainError(ErrorKind.NOT_FOUND, f"Role with ID {role_id} not found")


def _require_role(repository: RoleRepository, role_id: str) -> UserRole:
    role = repository.get(role_id)
    if role is None:
        raise _role_not_found(role_id)
    return role


def create_role(
    session: Session,
    *,
    name: str,
    display_name: str,
    description: str | None = None,
    level: int = 0,
    permissions: Iterable[str] = (),
    metadata: dict[str, Any] | None = None,
) -> Result[UserRole]:
    try:
        role = UserRole.create(
            name=name,
            display_name=display_name,
            description=description,
            level=level,
            permissions=permissions,
            metadata=metadata,
        )
        repository = RoleRepository(session)
        if repository.get_by_name(role.name) is not None:
            return Err.of(ErrorKind.CONFLICT, f"Role '{role.name}' already exists")
        return Ok(repository.create(role))
    except DomainError as exc:
        return Err(exc)
    except Exception as exc:
        logger.exception("Failed to create role %s", name)
        return unexpected_error(exc)


def list_roles(session: Session, *, include_inactive: bool = True) -> Result[list[UserRole]]:
    try:
        return Ok(list(RoleRepository(session).list(include_inactive=include_inactive)))
    except Exception as exc:
        logger.exception("Failed to list roles")
        return unexpected_error(exc)


def get_role(session: Session, role_id: str) -> Result[UserRole]:
    try:
        return Ok(_require_role(RoleRepository(session), role_id))
    except DomainError as exc:
        return Err(exc)
    except Exception as exc:
        logger.exception("Failed to load role %s", role_id)
        return unexpected_error(exc)


def update_role(
    session: Session,
    role_id: str,
    *,
    display_name: str | None = None,
    description: str | None = None,
    level: int | None = None,
    permissions: Iterable[str] | None = None,
) -> Result[UserRole]:
    """Update the descriptive fields and permissions of a custom role."""

    try:
        repository = RoleRepository(session)
        role = _require_role(repository, role_id)
        if level is not None and level < 0:
            return Err.of(
                ErrorKind.VALIDATION, "Validation failed: level: Level must be zero or greater"
            )
        updated = role.update_info(display_name=display_name, description=description, level=level)
        if permissions is not None:
            updated = updated.update_permissions(permissions)
        return Ok(repository.update(updated))
    except DomainError as exc:
        return Err(exc)
    except Exception as exc:
        logger.exception("Failed to update role %s", role_id)
        return unexpected_error(exc)


def activate_role(session: Session, role_id: str) -> Result[UserRole]:
    return _toggle_role(session, role_id, active=True)


def deactivate_role(session: Session, role_id: str) -> Result[UserRole]:
    return _toggle_role(session, role_id, active=False)


def _toggle_role(session: Session, role_id: str, *, active: bool) -> Result[UserRole]:
    try:
        repository = RoleRepository(session)
        role = _require_role(repository, role_id)
        updated = role.activate() if active else role.deactivate()
        if updated is role:
            return Ok(role)
        return Ok(repository.update(updated))
    except DomainError as exc:
        return Err(exc)
    except Exception as exc:
        logger.exception("Failed to change the state of role %s", role_id)
        return unexpected_error(exc)


def delete_role(session: Session, role_id: str) -> Result[None]:
    """Delete a custom role that is not the primary role of any user."""

    try:
        repository = RoleRepository(session)
        role = _require_role(repository, role_id)
        if not role.can_be_deleted():
            return Err.of(ErrorKind.BUSINESS_RULE, "Cannot delete system roles")
        if UserRepository(session).count_by_role(role_id):
            return Err.of(ErrorKind.CONFLICT, "Role is assigned as primary role to existing users")
        repository.delete(role_id)
        return Ok(None)
    except DomainError as exc:
        return Err(exc)
    except Exception as exc:
        logger.exception("Failed to delete role %s", role_id)
        return unexpected_error(exc)


def assign_role(
    session: Session,
    *,
    user_id: str,
    role_id: str,
    assigned_by: str | None = None,
    expires_at: datetime | None = None,
) -> Result[UserRoleAssignment]:
    """Bind ``role_id`` to ``user_id``, reactivating a previous assignment."""

    try:
        role = _require_role(RoleRepository(session), role_id)
        if not role.is_active:
            return Err.of(ErrorKind.BUSINESS_RULE, "Cannot assign an inactive role")
        if UserRepository(session).get(user_id) is None:
            return Err.of(ErrorKind.NOT_FOUND, f"User with ID {user_id} not found")

        expires_at = ensure_app_timezone(expires_at)
        assignments = RoleAssignmentRepository(session)
        existing = assignments.find(user_id, role_id)
        if existing is not None and existing.is_valid():
            return Err.of(ErrorKind.CONFLICT, "Role is already assigned to this user")
        assignment = UserRoleAssignment.create(
            user_id=user_id, role_id=role_id, assigned_by=assigned_by, expires_at=expires_at
        )
        if existing is not None:
            assignment = existing.activate().update_expiration(assignment.expires_at)
        saved = assignments.save(assignment)
        UserActivityRepository(session).create(
            UserActivity.role_change(
                user_id=user_id, role_id=role_id, action="assign", performed_by=assigned_by
            )
        )
        return Ok(saved)
    except DomainError as exc:
        return Err(exc)
    except Exception as exc:
        logger.exception("Failed to assign role %s to user %s", role_id, user_id)
        return unexpected_error(exc)


def revoke_role_assignment(
    session: Session, assignment_id: str, *, revoked_by: str | None = None
) -> Result[UserRoleAssignment]:
    try:
        assignments = RoleAssignmentRepository(session)
        assignment = assignments.get(assignment_id)
        if assignment is None:
            return Err.of(ErrorKind.NOT_FOUND, f"Role assignment with ID {assignment_id} not found")
        saved = assignments.save(assignment.deactivate())
        UserActivityRepository(session).create(
            UserActivity.role_change(
                user_id=assignment.user_id,
                role_id=assignment.role_id,
                action="revoke",
                performed_by=revoked_by,
            )
        )
        return Ok(saved)
    except Exception as exc:
        logger.exception("Failed to revoke role assignment %s", assignment_id)
        return unexpected_error(exc)


def list_user_roles(session: Session, user_id: str) -> Result[list[UserRole]]:
    try:
        if UserRepository(session).get(user_id) is None:
            return Err.of(ErrorKind.NOT_FOUND, f"User with ID {user_id} not found")
        return Ok(valid_roles_for_user(session, user_id))
    except Exception as exc:
        logger.exception("Failed to list roles of user %s", user_id)
        return unexpected_error(exc)


__all__ = [
    "activate_role",
    "assign_role",
    "create_role",
    "deactivate_role",
    "delete_role",
    "get_role",
    "list_roles",
    "list_user_roles",
    "revoke_role_assignment",
    "update_role",
]
