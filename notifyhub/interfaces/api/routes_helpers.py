"""Helper utilities shared across API route handlers."""

from typing import TypeVar

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from notifyhub.domain.entities import User
from notifyhub.domain.errors import DomainError, ErrorKind
from notifyhub.domain.result import Err, Result

T = TypeVar("T")


def unwrap(result: Result[T]) -> T:
    """Return the value of ``result`` or raise its :class:`DomainError`."""

    if isinstance(result, Err):
        raise result.error
    return result.value


def ensure_self_or_admin(current_user: User, user_id: str) -> None:
    if current_user.id != user_id and not current_user.is_admin():
        raise DomainError(ErrorKind.FORBIDDEN, "Not allowed to access another user's data")


async def handle_domain_error(request: Request, exc: DomainError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, handle_domain_error)


__all__ = [
    "ensure_self_or_admin",
    "handle_domain_error",
    "register_exception_handlers",
    "unwrap",
]
