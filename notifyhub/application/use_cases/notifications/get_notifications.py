"""Use case listing the notifications of a recipient."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from notifyhub.domain.entities import NotificationStatus, NotificationType
from notifyhub.domain.errors import ErrorKind

from ..errors import UNKNOWN_ERROR
from .mapper import NotificationMapper, NotificationResponse
from .ports import NotificationStore

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10
MAX_LIMIT = 100


@dataclass
class GetNotificationsRequest:
    recipient_id: str
    status: NotificationStatus | str | None = None
    type: NotificationType | str | None = None
    limit: int | None = None
    offset: int | None = None


@dataclass(frozen=True)
class GetNotificationsResponse:
    success: bool
    notifications: list[NotificationResponse] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = DEFAULT_LIMIT
    has_more: bool = False
    error: str | None = None
    error_kind: ErrorKind | None = None


def _validate(request: GetNotificationsRequest, limit: int, offset: int) -> list[str]:
    errors: list[str] = []
    if not 1 <= limit <= MAX_LIMIT:
        errors.append(f"limit: Limit must be between 1 and {MAX_LIMIT}")
    if offset < 0:
        errors.append("offset: Offset must be zero or greater")
    if request.status is not None:
        try:
            NotificationStatus(request.status)
        except ValueError:
            errors.append(f"status: Unknown status {request.status}")
    if request.type is not None:
        try:
            NotificationType(request.type)
        except ValueError:
            errors.append(f"type: Unknown type {request.type}")
    return errors


class GetNotificationsUseCase:
    """Return one page of a recipient's notifications, newest first.

    ``has_more`` is reported whenever the page is full, so a page that ends
    exactly on the last record still claims more results.
    """

    def __init__(self, notifications: NotificationStore) -> None:
        self._notifications = notifications

    def execute(self, request: GetNotificationsRequest) -> GetNotificationsResponse:
        limit = request.limit if request.limit is not None else DEFAULT_LIMIT
        offset = request.offset or 0
        try:
            errors = _validate(request, limit, offset)
            if errors:
                return GetNotificationsResponse(
                    success=False,
                    limit=limit,
                    error=f"Validation failed: {', '.join(errors)}",
                    error_kind=ErrorKind.VALIDATION,
                )

            notifications = self._notifications.find_by_user_id(
                request.recipient_id or "",
                status=request.status,
                type=request.type,
                limit=limit,
                offset=offset,
            )
            return GetNotificationsResponse(
                success=True,
                notifications=NotificationMapper.to_responses(notifications),
                total=len(notifications),
                # Offsets are not translated into page numbers.
                page=1,
                limit=limit,
                has_more=len(notifications) >= limit,
            )
        except Exception as exc:
            logger.exception("Failed to list notifications for %s", request.recipient_id)
            return GetNotificationsResponse(
                success=False,
                limit=limit,
                error=str(exc) or UNKNOWN_ERROR,
                error_kind=ErrorKind.INTERNAL,
            )


__all__ = [
    "DEFAULT_LIMIT",
    "GetNotificationsRequest",
    "GetNotificationsResponse",
    "GetNotificationsUseCase",
]
