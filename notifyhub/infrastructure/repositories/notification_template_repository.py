"""Persistence helpers for notification templates."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from notifyhub.domain.entities import NotificationChannel, NotificationTemplate, NotificationType
from notifyhub.infrastructure.models import NotificationTemplateModel
from notifyhub.utils import ensure_app_naive_datetime, ensure_app_timezone


class NotificationTemplateRepository:
    """Provide lookups and creation for :class:`NotificationTemplate` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def find_by_id(self, template_id: str) -> NotificationTemplate | None:
        model = self.session.get(NotificationTemplateModel, template_id)
        return self._to_entity(model) if model else None

    def find_by_slug(self, slug: str) -> NotificationTemplate | None:
        model = (
            self.session.query(NotificationTemplateModel)
            .filter(NotificationTemplateModel.slug == slug.strip().lower())
            .first()
        )
        return self._to_entity(model) if model else None

    def list(self, *, active_only: bool = False) -> Sequence[NotificationTemplate]:
        query = self.session.query(NotificationTemplateModel)
        if active_only:
            query = query.filter(NotificationTemplateModel.is_active.is_(True))
        query = query.order_by(NotificationTemplateModel.name.asc())
        return [self._to_entity(model) for model in query.all()]

    def create(self, template: NotificationTemplate) -> NotificationTemplate:
        model = NotificationTemplateModel(id=template.id)
        self._apply_entity_to_model(model, template)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def update(self, template: NotificationTemplate) -> NotificationTemplate:
        model = self.session.get(NotificationTemplateModel, template.id)
        if model is None:
            msg = f"Notification template with id {template.id} not found"
            raise ValueError(msg)
        self._apply_entity_to_model(model, template)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _apply_entity_to_model(
        model: NotificationTemplateModel, template: NotificationTemplate
    ) -> None:
        model.name = template.name
        model.slug = template.slug
        model.type = template.type.value
        model.channel = template.channel.value
        model.template = template.template
        model.subject = template.subject
        model.description = template.description
        model.variables = list(template.variables)
        model.default_values = dict(template.default_values)
        model.is_system = template.is_system
        model.is_active = template.is_active
        model.metadata_ = dict(template.metadata)
        model.created_at = ensure_app_naive_datetime(template.created_at)
        model.updated_at = ensure_app_naive_datetime(template.updated_at)

    @staticmethod
    def _to_entity(model: NotificationTemplateModel) -> NotificationTemplate:
        return NotificationTemplate(
            id=model.id,
            name=model.name,
            slug=model.slug,
            type=NotificationType(model.type),
            channel=NotificationChannel(model.channel),
            template=model.template,
            subject=model.subject,
            description=model.description,
            variables=tuple(model.variables or ()),
            default_values=dict(model.default_values or {}),
            is_system=model.is_system,
            is_active=model.is_active,
            metadata=dict(model.metadata_ or {}),
            created_at=ensure_app_timezone(model.created_at),
            updated_at=ensure_app_timezone(model.updated_at),
        )


__all__ = ["NotificationTemplateRepository"]
