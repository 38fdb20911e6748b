"""Persistence helpers for notification channel preferences."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from notifyhub.domain.entities import (
    NotificationFrequency,
    NotificationPreference,
    NotificationType,
)
from notifyhub.infrastructure.models import NotificationPreferenceModel
from notifyhub.utils import ensure_app_naive_datetime, ensure_app_timezone


class NotificationPreferenceRepository:
    """Provide read and upsert operations for :class:`NotificationPreference`."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def find_by_user_id(self, user_id: str) -> Sequence[NotificationPreference]:
        query = (
            self.session.query(NotificationPreferenceModel)
            .filter(NotificationPreferenceModel.user_id == user_id)
            .order_by(NotificationPreferenceModel.type.asc())
        )
        return [self._to_entity(model) for model in query.all()]

    def find_by_user_id_and_type(
        self, user_id: str, type: NotificationType | str
    ) -> Sequence[NotificationPreference]:
        """Return the preferences for ``type`` together with the user's general ones."""

        types = {NotificationType(type).value, NotificationType.GENERAL.value}
        query = (
            self.session.query(NotificationPreferenceModel)
            .filter(NotificationPreferenceModel.user_id == user_id)
            .filter(NotificationPreferenceModel.type.in_(types))
        )
        return [self._to_entity(model) for model in query.all()]

    def find_one(
        self, user_id: str, type: NotificationType | str
    ) -> NotificationPreference | None:
        model = (
            self.session.query(NotificationPreferenceModel)
            .filter(NotificationPreferenceModel.user_id == user_id)
            .filter(NotificationPreferenceModel.type == NotificationType(type).value)
            .first()
        )
        return self._to_entity(model) if model else None

    def save(self, preference: NotificationPreference) -> NotificationPreference:
        model = self.session.get(NotificationPreferenceModel, preference.id)
        if model is None:
            model = NotificationPreferenceModel(id=preference.id)
        self._apply_entity_to_model(model, preference)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _apply_entity_to_model(
        model: NotificationPreferenceModel, preference: NotificationPreference
    ) -> None:
        model.user_id = preference.user_id
        model.type = preference.type.value
        model.email_enabled = preference.email_enabled
        model.sms_enabled = preference.sms_enabled
        model.push_enabled = preference.push_enabled
        model.in_app_enabled = preference.in_app_enabled
        model.frequency = preference.frequency.value
        model.quiet_hours_enabled = preference.quiet_hours_enabled
        model.quiet_hours_start = preference.quiet_hours_start
        model.quiet_hours_end = preference.quiet_hours_end
        model.timezone = preference.timezone
        model.metadata_ = dict(preference.metadata)
        model.created_at = ensure_app_naive_datetime(preference.created_at)
        model.updated_at = ensure_app_naive_datetime(preference.updated_at)

    @staticmethod
    def _to_entity(model: NotificationPreferenceModel) -> NotificationPreference:
        return NotificationPreference(
            id=model.id,
            user_id=model.user_id,
            type=NotificationType(model.type),
            email_enabled=model.email_enabled,
            sms_enabled=model.sms_enabled,
            push_enabled=model.push_enabled,
            in_app_enabled=model.in_app_enabled,
            frequency=NotificationFrequency(model.frequency),
            quiet_hours_enabled=model.quiet_hours_enabled,
            quiet_hours_start=model.quiet_hours_start,
            quiet_hours_end=model.quiet_hours_end,
            timezone=model.timezone,
            metadata=dict(model.metadata_ or {}),
            created_at=ensure_app_timezone(model.created_at),
            updated_at=ensure_app_timezone(model.updated_at),
        )


__all__ = ["NotificationPreferenceRepository"]
