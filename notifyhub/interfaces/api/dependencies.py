"""FastAPI dependency utilities."""

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from notifyhub.config import get_settings
from notifyhub.domain.entities import User
from notifyhub.domain.errors import DomainError, ErrorKind
from notifyhub.infrastructure.database import get_db
from notifyhub.infrastructure.repositories import UserRepository
from notifyhub.infrastructure.security import decode_access_token, password_signature
from notifyhub.services import NotificationServices, build_notification_services

AUTHENTICATION_REQUIRED_MESSAGE = "Authentication required"

# Missing tokens are reported through DomainError so every 401 shares one body.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token", auto_error=False)


def _invalid_credentials() -> DomainError:
    return DomainError(ErrorKind.AUTHENTICATION_REQUIRED, "Invalid credentials")


def resolve_current_user(token: str, db: Session) -> User:
    """Return the user a bearer ``token`` was issued to."""

    try:
        payload = decode_access_token(token)
    except ValueError as exc:
        raise _invalid_credentials() from exc

    email = payload.get("sub")
    signature = payload.get("pwd_sig")
    if not isinstance(email, str) or not isinstance(signature, str):
        raise _invalid_credentials()

    user = UserRepository(db).get_by_email(email)
    if user is None or signature != password_signature(user.password, user.is_active):
        raise _invalid_credentials()
    return user


def get_current_user(
    token: str | None = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    if not token:
        raise DomainError(ErrorKind.AUTHENTICATION_REQUIRED, AUTHENTICATION_REQUIRED_MESSAGE)
    return resolve_current_user(token, db)


def get_current_active_user(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_active:
        raise DomainError(ErrorKind.FORBIDDEN, "Inactive user")
    return current_user


def require_admin(current_user: User = Depends(get_current_active_user)) -> User:
    """Ensure the authenticated user has administrator privileges."""

    if not current_user.is_admin():
        raise DomainError(ErrorKind.FORBIDDEN, "Administrator privileges required")
    return current_user


def get_notification_services(
    request: Request, db: Session = Depends(get_db)
) -> NotificationServices:
    """Return the notification use cases bound to the request session."""

    return build_notification_services(
        db, request.app.state.notification_dispatcher, get_settings()
    )


__all__ = [
    "get_current_active_user",
    "get_current_user",
    "get_notification_services",
    "oauth2_scheme",
    "require_admin",
    "resolve_current_user",
]
