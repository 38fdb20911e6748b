"""Use case for checking user credentials."""

from enum import Enum, auto

from sqlalchemy.orm import Session

from notifyhub.infrastructure.repositories import UserRepository
from notifyhub.infrastructure.security import verify_password


class AuthenticationStatus(Enum):
    """Outcomes of a sign-in attempt."""

    SUCCESS = auto()
    INVALID_CREDENTIALS = auto()
    INACTIVE = auto()


def authenticate_user(session: Session, email: str, password: str):
    """Return ``(user, status)`` for the given credentials."""

    user = UserRepository(session).get_by_email(email)
    if user is None or not verify_password(password, user.password):
        return None, AuthenticationStatus.INVALID_CREDENTIALS
    if not user.is_active:
        return user, AuthenticationStatus.INACTIVE
    return user, AuthenticationStatus.SUCCESS
