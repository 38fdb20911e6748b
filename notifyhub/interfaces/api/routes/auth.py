"""Endpoints issuing access tokens."""

import logging
from datetime import timedelta

from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from notifyhub.application.use_cases.users import (
    AuthenticationStatus,
    authenticate_user,
    record_login,
)
from notifyhub.config import get_settings
from notifyhub.domain.errors import DomainError, ErrorKind
from notifyhub.infrastructure.database import get_db
from notifyhub.infrastructure.security import create_access_token, password_signature
from notifyhub.interfaces.api.schemas import Token

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)


# OAuth2PasswordRequestForm calls the email field ``username``.
@router.post("/token", response_model=Token)
def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
):
    """Authenticate by email and password and return a bearer token."""

    user, auth_status = authenticate_user(db, form_data.username, form_data.password)

    if auth_status is AuthenticationStatus.INVALID_CREDENTIALS:
        logger.info("Rejected sign-in attempt for %s", form_data.username)
        raise DomainError(ErrorKind.AUTHENTICATION_REQUIRED, "Incorrect email or password")
    if auth_status is AuthenticationStatus.INACTIVE:
        raise DomainError(ErrorKind.FORBIDDEN, "Inactive user")

    access_token = create_access_token(
        data={
            "sub": user.email,
            "role": user.role.name,
            "pwd_sig": password_signature(user.password, user.is_active),
        },
        expires_delta=timedelta(minutes=get_settings().access_token_expire_minutes),
    )
    record_login(db, user.id)
    return {"access_token": access_token, "token_type": "bearer", "role": user.role.name}
