"""Endpoints and websocket handler for user notifications."""

from __future__ import annotations

import logging
import uuid

from anyio import to_thread
from fastapi import (
    APIRouter,
    Depends,
    Query,
    Request,
    Response,
    WebSocket,
    WebSocketDisconnect,
    status,
)

from notifyhub.application.use_cases.notifications import (
    GetNotificationsRequest,
    MarkNotificationReadRequest,
    SendNotificationRequest,
    UpdatePreferenceRequest,
)
from notifyhub.domain.entities import User
from notifyhub.domain.errors import DomainError, ErrorKind, status_for
from notifyhub.infrastructure.database import SessionLocal
from notifyhub.infrastructure.notifications import serialize_notification
from notifyhub.infrastructure.repositories import NotificationRepository
from notifyhub.interfaces.api.dependencies import (
    get_current_active_user,
    get_notification_services,
    require_admin,
    resolve_current_user,
)
from notifyhub.interfaces.api.routes_helpers import unwrap
from notifyhub.interfaces.api.schemas import (
    CleanupRead,
    NotificationActionResult,
    NotificationCountResult,
    NotificationListResponse,
    NotificationPreferenceRead,
    NotificationPreferenceUpdate,
    NotificationRead,
    NotificationStatsRead,
    SendNotificationPayload,
    SendNotificationResult,
)
from notifyhub.services import NotificationServices
from notifyhub.utils import now_in_app_timezone

router = APIRouter(prefix="/notifications", tags=["notifications"])
logger = logging.getLogger(__name__)


@router.post("/send", response_model=SendNotificationResult)
async def send_notification(
    payload: SendNotificationPayload,
    request: Request,
    response: Response,
    current_user: User = Depends(get_current_active_user),
    services: NotificationServices = Depends(get_notification_services),
) -> SendNotificationResult:
    """Create a notification and deliver it through the requested channels."""

    metadata = {
        **payload.metadata,
        "requestId": request.headers.get("X-Request-ID") or str(uuid.uuid4()),
        "timestamp": now_in_app_timezone().isoformat(),
        "senderId": current_user.id,
    }
    result = await services.send.execute(
        SendNotificationRequest(
            recipient_id=payload.recipient_id or current_user.id,
            type=payload.type,
            title=payload.title,
            content=payload.content,
            channels=payload.channels,
            priority=payload.priority,
            template_id=payload.template_id,
            template_variables=payload.template_variables,
            scheduled_at=payload.scheduled_at,
            expires_at=payload.expires_at,
            metadata=metadata,
        )
    )
    response.status_code = (
        status.HTTP_201_CREATED if result.success else status_for(result.error_kind)
    )
    return SendNotificationResult.model_validate(result)


@router.get("/", response_model=NotificationListResponse)
def list_notifications(
    response: Response,
    status_filter: str | None = Query(default=None, alias="status"),
    type: str | None = None,
    limit: int | None = None,
    offset: int | None = None,
    current_user: User = Depends(get_current_active_user),
    services: NotificationServices = Depends(get_notification_services),
) -> NotificationListResponse:
    result = services.list.execute(
        GetNotificationsRequest(
            recipient_id=current_user.id,
            status=status_filter,
            type=type,
            limit=limit,
            offset=offset,
        )
    )
    if not result.success:
        response.status_code = status_for(result.error_kind)
    return NotificationListResponse.model_validate(result)


@router.get("/stats", response_model=NotificationStatsRead)
def notification_stats(
    current_user: User = Depends(get_current_active_user),
    services: NotificationServices = Depends(get_notification_services),
) -> NotificationStatsRead:
    return NotificationStatsRead.model_validate(unwrap(services.stats.execute(current_user.id)))


@router.put("/read-all", response_model=NotificationCountResult)
def mark_all_notifications_read(
    current_user: User = Depends(get_current_active_user),
    services: NotificationServices = Depends(get_notification_services),
) -> NotificationCountResult:
    count = unwrap(services.mark_all_read.execute(current_user.id))
    return NotificationCountResult(count=count)


@router.get("/preferences", response_model=list[NotificationPreferenceRead])
def read_preferences(
    current_user: User = Depends(get_current_active_user),
    services: NotificationServices = Depends(get_notification_services),
) -> list[NotificationPreferenceRead]:
    preferences = unwrap(services.get_preferences.execute(current_user.id))
    return [NotificationPreferenceRead.model_validate(p) for p in preferences]


@router.put("/preferences", response_model=NotificationPreferenceRead)
def update_preference(
    payload: NotificationPreferenceUpdate,
    current_user: User = Depends(get_current_active_user),
    services: NotificationServices = Depends(get_notification_services),
) -> NotificationPreferenceRead:
    preference = unwrap(
        services.update_preference.execute(
            UpdatePreferenceRequest(user_id=current_user.id, **payload.model_dump())
        )
    )
    return NotificationPreferenceRead.model_validate(preference)


@router.post("/cleanup", response_model=CleanupRead)
def cleanup_notifications(
    _: User = Depends(require_admin),
    services: NotificationServices = Depends(get_notification_services),
) -> CleanupRead:
    return CleanupRead.model_validate(unwrap(services.cleanup.execute()))


@router.put("/{notification_id}/read", response_model=NotificationActionResult)
def mark_notification_read(
    notification_id: str,
    current_user: User = Depends(get_current_active_user),
    services: NotificationServices = Depends(get_notification_services),
) -> NotificationActionResult:
    result = services.mark_read.execute(
        MarkNotificationReadRequest(notification_id=notification_id, recipient_id=current_user.id)
    )
    if not result.success:
        raise DomainError(result.error_kind or ErrorKind.INTERNAL, result.error or "")
    return NotificationActionResult(
        success=True,
        message=result.message,
        notification=NotificationRead.model_validate(result.notification),
    )


@router.post("/{notification_id}/cancel", response_model=NotificationActionResult)
def cancel_notification(
    notification_id: str,
    current_user: User = Depends(get_current_active_user),
    services: NotificationServices = Depends(get_notification_services),
) -> NotificationActionResult:
    cancelled = unwrap(services.cancel.execute(notification_id, current_user.id))
    return NotificationActionResult(
        success=True,
        message="Notification cancelled",
        notification=NotificationRead.model_validate(cancelled),
    )


@router.delete("/{notification_id}", response_model=NotificationActionResult)
def delete_notification(
    notification_id: str,
    current_user: User = Depends(get_current_active_user),
    services: NotificationServices = Depends(get_notification_services),
) -> NotificationActionResult:
    unwrap(services.delete.execute(notification_id, current_user.id))
    return NotificationActionResult(success=True, message="Notification deleted")


@router.websocket("/ws")
async def notifications_websocket(websocket: WebSocket) -> None:
    """Stream notifications to the user owning the ``token`` query parameter."""

    token = websocket.query_params.get("token")
    if not token:
        await websocket.close(code=1008)
        return

    try:
        user, pending = await to_thread.run_sync(_load_user_and_unread, token)
    except DomainError:
        await websocket.close(code=1008)
        return

    manager = websocket.app.state.notification_manager
    await manager.connect(user.id, websocket)
    try:
        if pending:
            await websocket.send_json(
                {"type": "init", "data": [serialize_notification(n) for n in pending]}
            )
        while True:
            message = await websocket.receive_json()
            if not isinstance(message, dict):
                continue

            message_type = message.get("type")
            if message_type == "ping":
                await websocket.send_json({"type": "pong"})
            elif message_type == "ack":
                ids = message.get("ids", [])
                if isinstance(ids, list) and ids:
                    await to_thread.run_sync(_acknowledge, [str(i) for i in ids], user.id)
    except WebSocketDisconnect:
        logger.debug("Notification websocket closed for user %s", user.id)
    finally:
        manager.disconnect(user.id, websocket)


def _load_user_and_unread(token: str):
    with SessionLocal() as session:
        user = resolve_current_user(token, session)
        if not user.is_active:
            raise DomainError(ErrorKind.FORBIDDEN, "Inactive user")
        return user, NotificationRepository(session).find_unread_by_user(user.id)


def _acknowledge(notification_ids: list[str], user_id: str) -> int:
    with SessionLocal() as session:
        return NotificationRepository(session).mark_as_read(notification_ids, user_id=user_id)


__all__ = ["router"]
