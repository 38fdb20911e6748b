"""Single tagged error type shared by every feature."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Categories of expected failures; the value doubles as the public error code."""

    VALIDATION = "VALIDATION_ERROR"
    AUTHENTICATION_REQUIRED = "AUTHENTICATION_REQUIRED"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    TEMPLATE_NOT_FOUND = "TEMPLATE_NOT_FOUND"
    CONFLICT = "CONFLICT"
    NO_ENABLED_CHANNELS = "NO_ENABLED_CHANNELS"
    DELIVERY_FAILED = "DELIVERY_FAILED"
    BUSINESS_RULE = "BUSINESS_RULE_VIOLATION"
    INTERNAL = "INTERNAL_ERROR"


HTTP_STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.AUTHENTICATION_REQUIRED: 401,
    ErrorKind.UNAUTHORIZED: 403,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.TEMPLATE_NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.NO_ENABLED_CHANNELS: 422,
    ErrorKind.BUSINESS_RULE: 422,
    ErrorKind.DELIVERY_FAILED: 502,
    ErrorKind.INTERNAL: 500,
}


def status_for(kind: ErrorKind | None) -> int:
    """Return the HTTP status code associated with ``kind``."""

    if kind is None:
        return 500
    return HTTP_STATUS_BY_KIND.get(kind, 500)


class DomainError(Exception):
    """Expected failure carrying an :class:`ErrorKind` and a readable message."""

    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message

    @property
    def code(self) -> str:
        return self.kind.value

    @property
    def status_code(self) -> int:
        return status_for(self.kind)

    def to_dict(self) -> dict[str, object]:
        """Return the structured payload exposed by the HTTP layer."""

        return {"success": False, "message": self.message, "error": self.code}

    def __repr__(self) -> str:
        return f"DomainError(kind={self.kind.name}, message={self.message!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DomainError):
            return NotImplemented
        return self.kind is other.kind and self.message == other.message

    def __hash__(self) -> int:
        return hash((self.kind, self.message))


__all__ = ["DomainError", "ErrorKind", "HTTP_STATUS_BY_KIND", "status_for"]
