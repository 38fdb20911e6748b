"""Administrative endpoints for notification templates."""

from fastapi import APIRouter, Depends, status

from notifyhub.application.use_cases.notifications import CreateTemplateRequest
from notifyhub.domain.entities import User
from notifyhub.interfaces.api.dependencies import get_notification_services, require_admin
from notifyhub.interfaces.api.routes_helpers import unwrap
from notifyhub.interfaces.api.schemas import NotificationTemplateCreate, NotificationTemplateRead
from notifyhub.services import NotificationServices

router = APIRouter(prefix="/notification-templates", tags=["notification-templates"])


@router.get("/", response_model=list[NotificationTemplateRead])
def list_templates(
    active_only: bool = False,
    _: User = Depends(require_admin),
    services: NotificationServices = Depends(get_notification_services),
) -> list[NotificationTemplateRead]:
    templates = unwrap(services.list_templates.execute(active_only=active_only))
    return [NotificationTemplateRead.model_validate(template) for template in templates]


@router.post("/", response_model=NotificationTemplateRead, status_code=status.HTTP_201_CREATED)
def create_template(
    payload: NotificationTemplateCreate,
    _: User = Depends(require_admin),
    services: NotificationServices = Depends(get_notification_services),
) -> NotificationTemplateRead:
    template = unwrap(
        services.create_template.execute(CreateTemplateRequest(**payload.model_dump()))
    )
    return NotificationTemplateRead.model_validate(template)
