"""Helpers turning unexpected exceptions into tagged failures."""

from __future__ import annotations

from notifyhub.domain.errors import DomainError, ErrorKind
from notifyhub.domain.result import Err

UNKNOWN_ERROR = "Unknown error occurred"


def unexpected_error(exc: Exception) -> Err:
    """Wrap ``exc`` as an internal :class:`Err` keeping its message."""

    return Err(DomainError(ErrorKind.INTERNAL, str(exc) or UNKNOWN_ERROR))


__all__ = ["UNKNOWN_ERROR", "unexpected_error"]
