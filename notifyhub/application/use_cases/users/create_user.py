"""Use case for registering a user account."""

from __future__ import annotations

import logging
import uuid

from sqlalchemy.orm import Session

from notifyhub.domain.entities import ADMIN_ROLE_NAME, User, UserProfile, UserRole
from notifyhub.domain.entities.user_role import ADMIN_PERMISSIONS, USER_MANAGEMENT_PERMISSIONS
from notifyhub.domain.errors import DomainError, ErrorKind
from notifyhub.domain.result import Err, Ok, Result
from notifyhub.infrastructure.repositories import (
    RoleRepository,
    UserProfileRepository,
    UserRepository,
)
from notifyhub.infrastructure.security import get_password_hash
from notifyhub.utils import now_in_app_timezone

from ..errors import unexpected_error

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


def ensure_admin_role(session: Session) -> UserRole:
    """Return the ``admin`` system role, creating it when missing."""

    repository = RoleRepository(session)
    role = repository.get_by_name(ADMIN_ROLE_NAME)
    if role is not None:
        return role
    return repository.create(
        UserRole.create(
            name=ADMIN_ROLE_NAME,
            display_name="Administrator",
            level=100,
            is_system=True,
            permissions=sorted(ADMIN_PERMISSIONS | USER_MANAGEMENT_PERMISSIONS),
        )
    )


def create_user(
    session: Session,
    *,
    name: str,
    email: str,
    password: str,
    role_name: str,
) -> Result[User]:
    """Create an active user with the role called ``role_name`` and an empty profile."""

    try:
        if len(password or "") < MIN_PASSWORD_LENGTH:
            return Err.of(
                ErrorKind.VALIDATION,
                f"Validation failed: password: Must be at least {MIN_PASSWORD_LENGTH} characters",
            )
        users = UserRepository(session)
        if users.get_by_email(email) is not None:
            return Err.of(ErrorKind.CONFLICT, f"A user with email {email} already exists")
        role = RoleRepository(session).get_by_name(role_name)
        if role is None:
            return Err.of(ErrorKind.NOT_FOUND, f"Role '{role_name}' not found")

        now = now_in_app_timezone()
        user = users.create(
            User(
                id=str(uuid.uuid4()),
                role=role,
                name=name.strip(),
                email=email,
                password=get_password_hash(password),
                created_at=now,
                updated_at=now,
            )
        )
        first_name, _, last_name = user.name.partition(" ")
        UserProfileRepository(session).save(
            UserProfile.create(
                user_id=user.id, first_name=first_name or None, last_name=last_name or None
            )
        )
        logger.info("User %s created with role %s", user.email, role.name)
        return Ok(user)
    except DomainError as exc:
        return Err(exc)
    except Exception as exc:
        logger.exception("Failed to create user %s", email)
        return unexpected_error(exc)


__all__ = ["create_user", "ensure_admin_role"]
